import pytest

from rolegate.util import escape_assertion, escape_eval, parse_csv_line, remove_comment


def test_remove_comment():
    assert remove_comment("#") == ""
    assert (
        remove_comment(
            'g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act || r.sub == "root" # root is the super user'
        )
        == 'g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act || r.sub == "root"'
    )


def test_remove_comment_without_comment_strips_trailing_space():
    assert remove_comment("sub, obj, act   ") == "sub, obj, act"


def test_escape_assertion():
    s = "g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act"
    exp = "g(r_sub, p_sub) && r_obj == p_obj && r_act == p_act"
    assert escape_assertion(s) == exp

    s1 = "g(r2.sub, p2.sub) && r2.obj == p2.obj && r2.act == p2.act"
    exp1 = "g(r2_sub, p2_sub) && r2_obj == p2_obj && r2_act == p2_act"
    assert escape_assertion(s1) == exp1


def test_escape_assertion_leaves_other_identifiers():
    assert escape_assertion("user.name == rp.x") == "user.name == rp.x"


def test_escape_eval():
    assert escape_eval("eval(p.sub_rule) && r.obj == p.obj") == (
        "eval(escape_assertion(p.sub_rule)) && r.obj == p.obj"
    )


def test_escape_eval_without_eval_is_unchanged():
    assert escape_eval("r.obj == p.obj") == "r.obj == p.obj"


def test_csv_parse_1():
    assert parse_csv_line("alice, domain1, data1, action1") == [
        "alice",
        "domain1",
        "data1",
        "action1",
    ]


def test_csv_parse_2():
    assert parse_csv_line('alice, "domain1, domain2", data1 , action1') == [
        "alice",
        "domain1, domain2",
        "data1",
        "action1",
    ]


def test_csv_parse_3():
    assert parse_csv_line(",") == ["", ""]


@pytest.mark.parametrize("line", [" ", "#", " #", ""])
def test_csv_parse_4(line):
    assert parse_csv_line(line) is None


def test_csv_parse_5():
    assert parse_csv_line('alice, "domain1, domain2", "data1, data2", action1') == [
        "alice",
        "domain1, domain2",
        "data1, data2",
        "action1",
    ]


def test_csv_parse_6():
    assert parse_csv_line('" ') == ['"']


def test_csv_parse_7():
    assert parse_csv_line('" alice') == ['" alice']


def test_csv_parse_8():
    assert parse_csv_line('alice, "domain1, domain2') == ["alice", '"domain1, domain2']


def test_csv_parse_9():
    assert parse_csv_line('""') == [""]


def test_csv_parse_10():
    assert parse_csv_line('r.sub.Status == "ACTIVE", /data1, read') == [
        'r.sub.Status == "ACTIVE"',
        "/data1",
        "read",
    ]