import pytest

from rolegate.assertion import ModelError, PolicyError
from rolegate.model import DefaultModel, Model
from rolegate.role_manager import DefaultRoleManager


def _rbac_model() -> DefaultModel:
    m = DefaultModel()
    m.add_def("r", "r", "sub, obj, act")
    m.add_def("p", "p", "sub, obj, act")
    m.add_def("g", "g", "_, _")
    m.add_def("e", "e", "some(where (p.eft == allow))")
    m.add_def("m", "m", "g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act")
    return m


def test_model_is_abstract():
    with pytest.raises(TypeError):
        Model()


def test_request_definition_tokens():
    m = _rbac_model()
    assert m.model["r"]["r"].tokens == ["r_sub", "r_obj", "r_act"]
    assert m.model["p"]["p"].tokens == ["p_sub", "p_obj", "p_act"]
    assert m.model["r"]["r"].value == "sub, obj, act"


def test_matcher_is_escaped():
    m = _rbac_model()
    assert (
        m.model["m"]["m"].value
        == "g(r_sub, p_sub) && r_obj == p_obj && r_act == p_act"
    )
    assert m.model["m"]["m"].tokens == []


def test_comment_removed_from_definition():
    m = DefaultModel()
    assert m.add_def(
        "m",
        "m",
        'g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act || r.sub == "root" # root is the super user',
    )
    assert (
        m.model["m"]["m"].value
        == 'g(r_sub, p_sub) && r_obj == p_obj && r_act == p_act || r_sub == "root"'
    )


@pytest.mark.parametrize("value", ["", "   ", "# only a comment"])
def test_empty_definition_rejected(value):
    m = DefaultModel()
    assert m.add_def("p", "p", value) is False
    assert "p" not in m.model


def test_numbered_keys_kept_separately():
    m = DefaultModel()
    assert m.add_def("r", "r", "sub, obj")
    assert m.add_def("r", "r2", "sub, obj, act")
    assert list(m.model["r"]) == ["r", "r2"]
    assert m.model["r"]["r2"].tokens == ["r2_sub", "r2_obj", "r2_act"]


def test_policy_operations_through_model():
    m = _rbac_model()
    assert m.add_policy("p", "p", ["alice", "data1", "read"])
    assert not m.add_policy("p", "p", ["alice", "data1", "read"])
    assert m.has_policy("p", "p", ["alice", "data1", "read"])
    assert m.get_policy("p", "p") == [["alice", "data1", "read"]]
    assert m.remove_policy("p", "p", ["alice", "data1", "read"])
    assert m.get_policy("p", "p") == []


def test_build_role_links():
    m = _rbac_model()
    m.add_policy("g", "g", ["alice", "data2_admin"])
    rm = DefaultRoleManager(10)
    m.build_role_links(rm)
    assert rm.has_link("alice", "data2_admin")
    assert not rm.has_link("bob", "data2_admin")
    assert rm.get_roles("alice") == ["data2_admin"]
    assert m.model["g"]["g"].rm is rm


def test_build_role_links_with_domains():
    m = DefaultModel()
    m.add_def("g", "g", "_, _, _")
    m.add_policy("g", "g", ["alice", "admin", "domain1"])
    m.add_policy("g", "g", ["bob", "admin", "domain2"])
    rm = DefaultRoleManager(10)
    m.build_role_links(rm)
    assert rm.has_link("alice", "admin", "domain1")
    assert not rm.has_link("alice", "admin", "domain2")
    assert rm.has_link("bob", "admin", "domain2")


def test_build_role_links_covers_every_grouping_definition():
    m = DefaultModel()
    m.add_def("g", "g", "_, _")
    m.add_def("g", "g2", "_, _")
    m.add_policy("g", "g", ["alice", "admin"])
    m.add_policy("g", "g2", ["data1", "data_group"])
    rm = DefaultRoleManager(10)
    m.build_role_links(rm)
    assert rm.has_link("alice", "admin")
    assert rm.has_link("data1", "data_group")


def test_build_role_links_without_grouping_section():
    m = DefaultModel()
    m.add_def("p", "p", "sub, obj, act")
    rm = DefaultRoleManager(10)
    m.build_role_links(rm)
    assert rm.get_roles("alice") == []


def test_too_few_underscores_raise():
    m = DefaultModel()
    m.add_def("g", "g", "_")
    with pytest.raises(ModelError):
        m.build_role_links(DefaultRoleManager(10))


def test_multiple_domains_raise():
    m = DefaultModel()
    m.add_def("g", "g", "_, _, _, _")
    m.add_policy("g", "g", ["a", "b", "c", "d"])
    with pytest.raises(ModelError):
        m.build_role_links(DefaultRoleManager(10))


def test_short_rule_raises():
    m = DefaultModel()
    m.add_def("g", "g", "_, _, _")
    m.add_policy("g", "g", ["alice", "admin"])
    with pytest.raises(PolicyError) as info:
        m.build_role_links(DefaultRoleManager(10))
    assert info.value.expected == 3
    assert info.value.actual == 2


def test_clear_policy_keeps_definitions():
    m = _rbac_model()
    m.add_policy("p", "p", ["alice", "data1", "read"])
    m.add_policy("g", "g", ["alice", "admin"])
    m.clear_policy()
    assert m.get_policy("p", "p") == []
    assert m.get_policy("g", "g") == []
    assert m.model["r"]["r"].tokens == ["r_sub", "r_obj", "r_act"]