"""User credentials and bearer session tokens."""

from .credentials import CredentialStore
from .sessions import SessionIssuer

__all__ = ["CredentialStore", "SessionIssuer"]
