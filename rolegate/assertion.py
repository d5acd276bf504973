"""A single definition line of a model together with its policy rules."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from rolegate.role_manager import DefaultRoleManager, RoleManager

Rule = tuple[str, ...]


class ModelError(Exception):
    """Raised when a model definition is malformed or unsupported."""


class PolicyError(Exception):
    """Raised when a policy rule does not fit its definition."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"policy rule has {actual} fields but its definition needs at least {expected}"
        )
        self.expected = expected
        self.actual = actual


def _default_role_manager() -> RoleManager:
    return DefaultRoleManager(0)


@dataclass
class Assertion:
    """One keyed definition (``r``, ``p``, ``g``, ...) and the rules stored under it.

    ``policy`` keeps rules as tuples in insertion order without duplicates.
    """

    key: str = ""
    value: str = ""
    tokens: list[str] = field(default_factory=list)
    policy: dict[Rule, None] = field(default_factory=dict)
    rm: RoleManager = field(default_factory=_default_role_manager)

    def add_rules(self, rules: Iterable[Iterable[str]]) -> None:
        """Append rules that are not stored yet, keeping their order."""
        for rule in rules:
            self.policy.setdefault(tuple(rule), None)

    def build_role_links(self, rm: RoleManager) -> None:
        """Feed every grouping rule into ``rm`` and keep ``rm`` as this role manager.

        Raises ``ModelError`` for a definition with fewer than two or more than
        three ``_`` fields, and ``PolicyError`` for a rule that is too short.
        """
        count = self.value.count("_")
        if count < 2:
            raise ModelError(
                'the number of "_" in role definition should be at least 2'
            )
        for rule in self.policy:
            if len(rule) < count:
                raise PolicyError(count, len(rule))
            if count == 2:
                rm.add_link(rule[0], rule[1], None)
            elif count == 3:
                rm.add_link(rule[0], rule[1], rule[2])
            else:
                raise ModelError("Multiple domains are not supported")
        self.rm = rm