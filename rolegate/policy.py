"""Storage and querying of policy rules grouped by section and type."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from rolegate.assertion import Assertion

AssertionMap = dict[str, Assertion]


def _matches(rule: Sequence[str], field_index: int, field_values: Sequence[str]) -> bool:
    return all(
        not value or rule[field_index + offset] == value
        for offset, value in enumerate(field_values)
    )


class PolicyStore:
    """Policy rules held in assertions, keyed by section (``p``, ``g``) and type."""

    def __init__(self) -> None:
        self.model: dict[str, AssertionMap] = {}

    def _assertion(self, sec: str, ptype: str) -> Assertion | None:
        return self.model.get(sec, {}).get(ptype)

    def add_policy(self, sec: str, ptype: str, rule: Iterable[str]) -> bool:
        """Store ``rule``; ``False`` if it was already there or the type is unknown."""
        ast = self._assertion(sec, ptype)
        if ast is None:
            return False
        key = tuple(rule)
        if key in ast.policy:
            return False
        ast.policy[key] = None
        return True

    def add_policies(self, sec: str, ptype: str, rules: Iterable[Iterable[str]]) -> bool:
        """Store all ``rules``, or none of them if any is already present."""
        ast = self._assertion(sec, ptype)
        keys = [tuple(rule) for rule in rules]
        if ast is None:
            return True
        if any(key in ast.policy for key in keys):
            return False
        ast.add_rules(keys)
        return True

    def get_policy(self, sec: str, ptype: str) -> list[list[str]]:
        """All rules of the type, in the order they were added."""
        ast = self._assertion(sec, ptype)
        if ast is None:
            return []
        return [list(rule) for rule in ast.policy]

    def get_filtered_policy(
        self, sec: str, ptype: str, field_index: int, field_values: Sequence[str]
    ) -> list[list[str]]:
        """Rules whose fields from ``field_index`` on equal ``field_values``.

        An empty string in ``field_values`` matches any value.
        """
        ast = self._assertion(sec, ptype)
        if ast is None:
            return []
        return [
            list(rule)
            for rule in ast.policy
            if _matches(rule, field_index, field_values)
        ]

    def has_policy(self, sec: str, ptype: str, rule: Iterable[str]) -> bool:
        """Whether exactly ``rule`` is stored."""
        ast = self._assertion(sec, ptype)
        return ast is not None and tuple(rule) in ast.policy

    def get_values_for_field_in_policy(
        self, sec: str, ptype: str, field_index: int
    ) -> list[str]:
        """Distinct values of one field across the rules, in first-seen order."""
        values = dict.fromkeys(rule[field_index] for rule in self.get_policy(sec, ptype))
        return list(values)

    def remove_policy(self, sec: str, ptype: str, rule: Iterable[str]) -> bool:
        """Remove ``rule``; ``False`` if it was not stored."""
        ast = self._assertion(sec, ptype)
        if ast is None:
            return False
        key = tuple(rule)
        if key not in ast.policy:
            return False
        del ast.policy[key]
        return True

    def remove_policies(self, sec: str, ptype: str, rules: Iterable[Iterable[str]]) -> bool:
        """Remove all ``rules``, or none of them if any is missing."""
        ast = self._assertion(sec, ptype)
        keys = [tuple(rule) for rule in rules]
        if ast is None:
            return True
        if any(key not in ast.policy for key in keys):
            return False
        for key in keys:
            ast.policy.pop(key, None)
        return True

    def clear_policy(self) -> None:
        """Drop every rule of the ``p`` and ``g`` sections."""
        for sec in ("p", "g"):
            for ast in self.model.get(sec, {}).values():
                ast.policy.clear()

    def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, field_values: Sequence[str]
    ) -> tuple[bool, list[list[str]]]:
        """Remove rules matching the filter; return whether any went and which."""
        if not field_values:
            return False, []
        ast = self._assertion(sec, ptype)
        if ast is None:
            return False, []
        removed = [
            rule for rule in ast.policy if _matches(rule, field_index, field_values)
        ]
        for rule in removed:
            del ast.policy[rule]
        return bool(removed), [list(rule) for rule in removed]