"""Access-control models built from section definitions and policy rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from rolegate.assertion import Assertion
from rolegate.policy import AssertionMap, PolicyStore
from rolegate.role_manager import RoleManager
from rolegate.util import escape_assertion, remove_comment


class Model(ABC):
    """Interface of a model: definitions by section plus the rules stored under them."""

    model: dict[str, AssertionMap]

    @abstractmethod
    def add_def(self, sec: str, key: str, value: str) -> bool:
        """Add the definition ``key`` to section ``sec``."""

    @abstractmethod
    def build_role_links(self, rm: RoleManager) -> None:
        """Load every grouping rule into ``rm``."""

    @abstractmethod
    def add_policy(self, sec: str, ptype: str, rule: Iterable[str]) -> bool:
        """Store one rule."""

    @abstractmethod
    def add_policies(self, sec: str, ptype: str, rules: Iterable[Iterable[str]]) -> bool:
        """Store several rules at once."""

    @abstractmethod
    def get_policy(self, sec: str, ptype: str) -> list[list[str]]:
        """All rules of a type."""

    @abstractmethod
    def get_filtered_policy(
        self, sec: str, ptype: str, field_index: int, field_values: Sequence[str]
    ) -> list[list[str]]:
        """Rules matching a field filter."""

    @abstractmethod
    def has_policy(self, sec: str, ptype: str, rule: Iterable[str]) -> bool:
        """Whether a rule is stored."""

    @abstractmethod
    def get_values_for_field_in_policy(
        self, sec: str, ptype: str, field_index: int
    ) -> list[str]:
        """Distinct values of one field."""

    @abstractmethod
    def remove_policy(self, sec: str, ptype: str, rule: Iterable[str]) -> bool:
        """Remove one rule."""

    @abstractmethod
    def remove_policies(self, sec: str, ptype: str, rules: Iterable[Iterable[str]]) -> bool:
        """Remove several rules at once."""

    @abstractmethod
    def clear_policy(self) -> None:
        """Drop every stored rule."""

    @abstractmethod
    def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, field_values: Sequence[str]
    ) -> tuple[bool, list[list[str]]]:
        """Remove rules matching a field filter."""


class DefaultModel(PolicyStore, Model):
    """In-memory model holding definitions and policy rules."""

    def add_def(self, sec: str, key: str, value: str) -> bool:
        """Add a definition; ``False`` if ``value`` is empty once comments are removed.

        Request and policy definitions are split into ``key_field`` tokens; other
        sections have their ``r.``/``p.`` references escaped.
        """
        ast = Assertion(key=key, value=remove_comment(value))
        if not ast.value:
            return False

        if sec in ("r", "p"):
            ast.tokens = [f"{key}_{part.strip()}" for part in ast.value.split(",")]
        else:
            ast.value = escape_assertion(ast.value)

        self.model.setdefault(sec, {})[key] = ast
        return True

    def build_role_links(self, rm: RoleManager) -> None:
        """Load the rules of every ``g`` definition into ``rm``."""
        for ast in self.model.get("g", {}).values():
            ast.build_role_links(rm)