"""Matching functions usable from matcher expressions and role managers."""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Callable, Iterator
from functools import lru_cache

MatchFn = Callable[[str, str], bool]

_MAT_B = re.compile(r":[^/]*")
_MAT_P = re.compile(r"\{[^/]*\}")
_NETMASK = re.compile(r"\+?[0-9]+")


class FunctionMap:
    """Named two-argument matching functions, preloaded with the built-ins."""

    def __init__(self) -> None:
        self._functions: dict[str, MatchFn] = {
            "keyMatch": key_match,
            "keyMatch2": key_match2,
            "keyMatch3": key_match3,
            "regexMatch": regex_match,
            "globMatch": glob_match,
            "ipMatch": ip_match,
        }

    def add_function(self, fname: str, f: MatchFn) -> None:
        """Register ``f`` under ``fname``, replacing any function of that name."""
        self._functions[fname] = f

    def get_functions(self) -> Iterator[tuple[str, MatchFn]]:
        """Iterate over ``(name, function)`` pairs."""
        return iter(self._functions.items())


def key_match(key1: str, key2: str) -> bool:
    """``key1`` matches ``key2`` where a ``*`` in ``key2`` ends the comparison.

    For example ``/foo/bar`` matches ``/foo/*``.
    """
    i = key2.find("*")
    if i < 0:
        return key1 == key2
    if len(key1) > i:
        return key1[:i] == key2[:i]
    return key1 == key2[:i]


def key_match2(key1: str, key2: str) -> bool:
    """RESTful match where ``*`` and ``:name`` segments are wildcards."""
    key2 = key2.replace("/*", "/.*")
    key2 = _MAT_B.sub("[^/]+", key2)
    return regex_match(key1, f"^{key2}$")


def key_match3(key1: str, key2: str) -> bool:
    """RESTful match where ``*`` and ``{name}`` segments are wildcards."""
    key2 = key2.replace("/*", "/.*")
    key2 = _MAT_P.sub("[^/]+", key2)
    return regex_match(key1, f"^{key2}$")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def regex_match(key1: str, key2: str) -> bool:
    """``key1`` contains a match of the regular expression ``key2``.

    Raises ``re.error`` if ``key2`` is not a valid expression.
    """
    return _compile(key2).search(key1) is not None


def _ipv6_to_ipv4(addr: ipaddress.IPv6Address) -> ipaddress.IPv4Address | None:
    """IPv4 form of an IPv4-compatible or IPv4-mapped IPv6 address."""
    value = int(addr)
    upper = value >> 32
    if upper >> 16 == 0 and upper & 0xFFFF in (0, 0xFFFF):
        return ipaddress.IPv4Address(value & 0xFFFFFFFF)
    return None


def ip_match(key1: str, key2: str) -> bool:
    """IP ``key1`` equals address ``key2`` or lies in the CIDR block ``key2``.

    Raises ``ValueError`` for an unparsable address or netmask.
    """
    addr_part, sep, mask_part = key2.partition("/")
    try:
        ip1 = ipaddress.ip_address(key1)
        ip2 = ipaddress.ip_address(addr_part)
    except ValueError:
        raise ValueError(f"invalid argument {key1} {key2}") from None

    if sep:
        if not _NETMASK.fullmatch(mask_part) or int(mask_part) > 255:
            raise ValueError(f"invalid netmask {mask_part}")
        try:
            network = ipaddress.ip_network(f"{ip2}/{int(mask_part)}", strict=False)
        except ValueError as err:
            raise ValueError(f"invalid ip network {err}") from None
        return ip1 in network

    if isinstance(ip1, ipaddress.IPv4Address) and isinstance(ip2, ipaddress.IPv6Address):
        converted = _ipv6_to_ipv4(ip2)
        if converted is not None:
            return converted == ip1
    return ip1 == ip2


def _glob_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate a ``[...]`` class beginning at ``start``; return regex and next index."""
    i = start + 1
    negate = False
    if i < len(pattern) and pattern[i] in "!^":
        negate = True
        i += 1
    body = []
    first = True
    while i < len(pattern):
        ch = pattern[i]
        if ch == "]" and not first:
            prefix = "^" if negate else ""
            return f"[{prefix}{''.join(body)}]", i + 1
        body.append("\\" + ch if ch in "\\[]^" else ch)
        first = False
        i += 1
    raise ValueError(f"unclosed character class in glob {pattern!r}")


def _glob_to_regex(pattern: str) -> str:
    out: list[str] = []
    in_alternation = False
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            if i + 1 < n and pattern[i + 1] == "*":
                at_start = i == 0
                after_slash = i > 0 and pattern[i - 1] == "/"
                nxt = i + 2
                at_end = nxt == n
                slash_next = nxt < n and pattern[nxt] == "/"
                if at_start and at_end:
                    out.append(".*")
                    i = nxt
                elif at_start and slash_next:
                    out.append("(?:/?|.*/)")
                    i = nxt + 1
                elif after_slash and at_end:
                    out.append(".*")
                    i = nxt
                elif after_slash and slash_next:
                    out.append("(?:.*/)?")
                    i = nxt + 1
                else:
                    raise ValueError(f"invalid use of ** in glob {pattern!r}")
                continue
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[":
            cls, i = _glob_class(pattern, i)
            out.append(cls)
            continue
        elif ch == "{":
            if in_alternation:
                raise ValueError(f"nested alternate groups in glob {pattern!r}")
            in_alternation = True
            out.append("(?:")
        elif ch == "}" and in_alternation:
            in_alternation = False
            out.append(")")
        elif ch == "," and in_alternation:
            out.append("|")
        elif ch == "\\":
            if i + 1 >= n:
                raise ValueError(f"dangling escape in glob {pattern!r}")
            i += 1
            out.append(re.escape(pattern[i]))
        else:
            out.append(re.escape(ch))
        i += 1
    if in_alternation:
        raise ValueError(f"unclosed alternate group in glob {pattern!r}")
    return "".join(out)


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    return re.compile(_glob_to_regex(pattern), re.DOTALL)


def glob_match(key1: str, key2: str) -> bool:
    """``key1`` matches the glob ``key2``; ``*`` stops at ``/``, ``**`` does not."""
    return _compile_glob(key2).fullmatch(key1) is not None