# rolegate

rolegate provides building blocks for role-based access control:

- a role manager that supports domains and role hierarchies
- a model that holds request, policy, role, effect and matcher definitions
- a store for policy rules
- helper functions that match keys, paths, regular expressions, IP addresses and globs

The package uses only the standard library.

## Installation

```
pip install rolegate
```

To install the test tools as well:

```
pip install "rolegate[test]"
```

## Role manager

`rolegate.role_manager.DefaultRoleManager` records which names inherit which
roles. You can place links in a domain, or leave the domain as `None` to use the
default domain.

`has_link` follows the hierarchy. The constructor argument sets how many steps
it follows; the default is 10.

```python
from rolegate.role_manager import DefaultRoleManager

rm = DefaultRoleManager(3)
rm.add_link("u1", "g1")
rm.add_link("g1", "g3")

rm.has_link("u1", "g3")   # True
rm.get_roles("u1")        # ["g1"]
rm.get_users("g1")        # ["u1"]

rm.delete_link("g1", "g3")
rm.has_link("u1", "g3")   # False
```

- `get_roles` returns only the roles a name inherits directly.
- `get_users` returns only the names that inherit a role directly.
- `delete_link` raises `RbacError` if either name is unknown in that domain.
- `clear` removes every role and link.

With domains:

```python
rm.add_link("alice", "admin", "domain1")
rm.has_link("alice", "admin", "domain1")  # True
rm.has_link("alice", "admin", "domain2")  # False
```

`matching_fn(role_matching_fn, domain_matching_fn)` sets functions that match
role names or domain names as patterns. For example, with a domain matcher set,
a link made in the domain `"*"` applies to every domain:

```python
from rolegate.function_map import key_match

rm = DefaultRoleManager(3)
rm.matching_fn(None, key_match)
rm.add_link("u1", "g1", "*")
rm.has_role("u1", "domain2")  # True
```

The abstract base class `RoleManager` defines the interface for role managers
of your own. `Role` is the node type that `DefaultRoleManager` uses.

## Matching functions

```python
from rolegate.function_map import (
    key_match, key_match2, key_match3, regex_match, ip_match, glob_match,
)

key_match("/foo/bar", "/foo/*")              # True
key_match2("/foo/baz", "/foo/:bar")          # True
key_match3("/foo/baz", "/foo/{bar}")         # True
regex_match("foobar", "^foo*")               # True
ip_match("192.168.2.123", "192.168.2.0/24")  # True
glob_match("/abc/123", "/abc/*")             # True
glob_match("/abc/123/456", "/abc/*")         # False
glob_match("/abc/123/456", "/abc/**")        # True
```

- `regex_match` searches the first argument for the pattern.
- `ip_match` raises `ValueError` for an address or netmask it cannot parse.

`FunctionMap` holds these functions under the names that matcher expressions
use: `keyMatch`, `keyMatch2`, `keyMatch3`, `regexMatch`, `ipMatch` and
`globMatch`. To register your own function, call `add_function(name, f)`.
`get_functions()` iterates over the `(name, function)` pairs.

## Models and policies

`rolegate.model.DefaultModel` holds definitions by section:

| Section | Holds |
|---------|-------|
| `r` | request |
| `p` | policy |
| `g` | role |
| `e` | effect |
| `m` | matchers |

```python
from rolegate.model import DefaultModel
from rolegate.role_manager import DefaultRoleManager

m = DefaultModel()
m.add_def("r", "r", "sub, obj, act")
m.add_def("p", "p", "sub, obj, act")
m.add_def("g", "g", "_, _")
m.add_def("e", "e", "some(where (p.eft == allow))")
m.add_def("m", "m", "g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act")

m.add_policy("p", "p", ["data2_admin", "data2", "read"])
m.add_policy("g", "g", ["alice", "data2_admin"])

rm = DefaultRoleManager(10)
m.build_role_links(rm)
rm.has_link("alice", "data2_admin")  # True
```

`add_def` handles the value as follows:

- It removes any `#` comment first.
- It returns `False` if nothing is left after that.
- For `r` and `p`, it splits the value into tokens such as `r_sub`.
- For the other sections, it rewrites `r.x` and `p.x` references to `r_x` and `p_x`.

The policy operations come from `rolegate.policy.PolicyStore`:

- `add_policy`
- `add_policies`
- `get_policy`
- `get_filtered_policy`
- `has_policy`
- `get_values_for_field_in_policy`
- `remove_policy`
- `remove_policies`
- `remove_filtered_policy`
- `clear_policy`

Rules keep the order in which they were added, and no rule is stored twice.

`add_policies` and `remove_policies` work all-or-nothing. In a filter, an empty
string matches any value.

Each definition is held in a `rolegate.assertion.Assertion`. A role definition
needs at least two `_` fields; with three, the third field of each rule is the
domain. `build_role_links` raises `ModelError` in two cases:

- the definition has fewer than two `_` fields
- the definition has more than three `_` fields

It raises `PolicyError` if a rule is shorter than its definition.

## Utilities

`rolegate.util` has the text helpers that the model uses:

```python
from rolegate.util import parse_csv_line, escape_assertion, remove_comment, escape_eval

parse_csv_line('alice, "domain1, domain2", data1, action1')
# ["alice", "domain1, domain2", "data1", "action1"]
parse_csv_line("# comment")                   # None

escape_assertion("r.sub == p.sub")            # "r_sub == p_sub"
remove_comment("r.sub == p.sub # a comment")  # "r.sub == p.sub"
escape_eval("eval(p.rule)")                   # "eval(escape_assertion(p.rule))"
```

## What the package does not do

rolegate stores definitions, rules and role links, and it provides the matching
functions. It does not contain:

- an enforcer that evaluates matcher expressions against requests
- a reader for model configuration files or policy files; `parse_csv_line` handles a single line
- adapters for persistent storage
- change notification or caching of decisions

## Running the tests

```
pytest
```