"""Role inheritance graphs, optionally split by domain."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

MatchingFn = Callable[[str, str], bool]

DEFAULT_DOMAIN = "DEFAULT"


class RbacError(Exception):
    """Raised when a role operation refers to roles that do not exist."""


class RoleManager(ABC):
    """Interface of a store of links between users and roles."""

    @abstractmethod
    def clear(self) -> None:
        """Forget every role and link."""

    @abstractmethod
    def add_link(self, name1: str, name2: str, domain: str | None = None) -> None:
        """Make ``name1`` inherit role ``name2``."""

    @abstractmethod
    def matching_fn(
        self,
        role_matching_fn: MatchingFn | None,
        domain_matching_fn: MatchingFn | None,
    ) -> None:
        """Set the pattern functions used for role and domain names."""

    @abstractmethod
    def delete_link(self, name1: str, name2: str, domain: str | None = None) -> None:
        """Remove the link from ``name1`` to ``name2``."""

    @abstractmethod
    def has_link(self, name1: str, name2: str, domain: str | None = None) -> bool:
        """Whether ``name1`` inherits ``name2``, directly or not."""

    @abstractmethod
    def get_roles(self, name: str, domain: str | None = None) -> list[str]:
        """Roles that ``name`` directly inherits."""

    @abstractmethod
    def get_users(self, name: str, domain: str | None = None) -> list[str]:
        """Names that directly inherit role ``name``."""


class Role:
    """A named node holding the roles it directly inherits."""

    __slots__ = ("name", "roles")

    def __init__(self, name: str, roles: list[Role] | None = None) -> None:
        self.name = name
        self.roles: list[Role] = list(roles) if roles else []

    def __repr__(self) -> str:
        return f"Role({self.name!r}, roles={self.get_roles()!r})"

    def copy(self) -> Role:
        """Shallow copy: a new node sharing the same child roles."""
        return Role(self.name, self.roles)

    def add_role(self, other_role: Role) -> bool:
        """Link ``other_role``; ``False`` if that very role was already linked."""
        if any(role is other_role for role in self.roles):
            return False
        self.roles.append(other_role)
        return True

    def delete_role(self, other_role: Role) -> None:
        """Unlink every child role named like ``other_role``."""
        self.roles = [role for role in self.roles if role.name != other_role.name]

    def has_role(self, name: str, hierarchy_level: int) -> bool:
        """Whether ``name`` is this role or reachable within ``hierarchy_level`` steps."""
        if self.name == name:
            return True
        if hierarchy_level <= 0:
            return False
        return any(role.has_role(name, hierarchy_level - 1) for role in self.roles)

    def get_roles(self) -> list[str]:
        """Names of the directly linked roles."""
        return [role.name for role in self.roles]

    def has_direct_role(self, name: str) -> bool:
        """Whether a directly linked role is called ``name``."""
        return any(role.name == name for role in self.roles)


class DefaultRoleManager(RoleManager):
    """In-memory role manager with per-domain role graphs."""

    def __init__(self, max_hierarchy_level: int = 10) -> None:
        self.max_hierarchy_level = max_hierarchy_level
        self._all_domains: dict[str, dict[str, Role]] = {}
        self._role_matching_fn: MatchingFn | None = None
        self._domain_matching_fn: MatchingFn | None = None

    def _create_role(self, name: str, domain: str | None) -> Role:
        domain_key = domain if domain is not None else DEFAULT_DOMAIN
        roles = self._all_domains.setdefault(domain_key, {})
        role = roles.get(name)
        if role is not None:
            return role

        role = Role(name)
        roles[name] = role
        if self._role_matching_fn is not None:
            for key, value in roles.items():
                if key != name and self._role_matching_fn(name, key):
                    role.add_role(value)
        return role

    def _matched_domains(self, domain: str | None) -> list[str]:
        domain_key = domain if domain is not None else DEFAULT_DOMAIN
        if self._domain_matching_fn is not None:
            return [
                key
                for key in self._all_domains
                if self._domain_matching_fn(domain_key, key)
            ]
        return [domain_key] if domain_key in self._all_domains else []

    def _create_temp_role(self, name: str, domain: str | None) -> Role:
        temp = self._create_role(name, domain).copy()
        for other in self._matched_domains(domain):
            if other == domain:
                continue
            for direct_role in list(self._create_role(name, other).roles):
                temp.add_role(direct_role)
        return temp

    def has_role(self, name: str, domain: str | None = None) -> bool:
        """Whether ``name`` exists, or matches a pattern role, in a matching domain."""
        for matched in self._matched_domains(domain):
            roles = self._all_domains.get(matched)
            if roles is None:
                continue
            if name in roles:
                return True
            if self._role_matching_fn is not None and any(
                self._role_matching_fn(name, key) for key in roles
            ):
                return True
        return False

    def clear(self) -> None:
        self._all_domains.clear()

    def add_link(self, name1: str, name2: str, domain: str | None = None) -> None:
        if name1 == name2:
            return
        role1 = self._create_role(name1, domain)
        role2 = self._create_role(name2, domain)
        role1.add_role(role2)

    def matching_fn(
        self,
        role_matching_fn: MatchingFn | None = None,
        domain_matching_fn: MatchingFn | None = None,
    ) -> None:
        self._domain_matching_fn = domain_matching_fn
        self._role_matching_fn = role_matching_fn

    def delete_link(self, name1: str, name2: str, domain: str | None = None) -> None:
        """Remove a link; raises ``RbacError`` if either role is unknown."""
        if not self.has_role(name1, domain) or not self.has_role(name2, domain):
            raise RbacError(f"{name1} OR {name2}")
        role1 = self._create_role(name1, domain)
        role2 = self._create_role(name2, domain)
        role1.delete_role(role2)

    def has_link(self, name1: str, name2: str, domain: str | None = None) -> bool:
        if name1 == name2:
            return True
        if not (self.has_role(name1, domain) and self.has_role(name2, domain)):
            return False
        if self._domain_matching_fn is not None:
            role = self._create_temp_role(name1, domain)
        else:
            role = self._create_role(name1, domain)
        return role.has_role(name2, self.max_hierarchy_level)

    def get_roles(self, name: str, domain: str | None = None) -> list[str]:
        if not self.has_role(name, domain):
            return []
        return self._create_temp_role(name, domain).get_roles()

    def get_users(self, name: str, domain: str | None = None) -> list[str]:
        users: dict[str, None] = {}
        for matched in self._matched_domains(domain):
            for role in self._all_domains.get(matched, {}).values():
                if role.has_direct_role(name):
                    users[role.name] = None
        return list(users)