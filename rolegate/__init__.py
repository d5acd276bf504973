"""Role managers, policy models and matching functions for access control."""

__version__ = "0.1.0"

__all__ = ["assertion", "function_map", "model", "policy", "role_manager", "util"]