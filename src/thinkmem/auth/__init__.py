"""Auth module - bearer secrets for mutating tools."""

from thinkmem.auth.secrets import SecretManager

__all__ = ["SecretManager"]
