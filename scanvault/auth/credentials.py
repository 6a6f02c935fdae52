"""Credential store: user registration and password verification.

Only werkzeug password digests are persisted; plaintext passwords never
leave this module.
"""

from werkzeug.security import check_password_hash, generate_password_hash

from scanvault.storage.repositories import User, UserRepository
from scanvault.utils.logger import get_logger

logger = get_logger(__name__)


class CredentialStore:
    """Registers users and checks their passwords.

    Args:
        users: Repository holding user records.
    """

    def __init__(self, users: UserRepository) -> None:
        self.users = users
        # Checked against when the username is unknown, so both failure paths
        # perform one digest verification.
        self._dummy_hash = generate_password_hash("scanvault-unknown-user")

    def register(self, username: str, password: str) -> User:
        """Store a new user with a digest of ``password``.

        Raises:
            DuplicateUser: If the username already exists.
        """
        user = self.users.add(username, generate_password_hash(password))
        logger.info("Registered user %s", username)
        return user

    def verify(self, username: str, password: str) -> bool:
        """Return whether ``password`` matches the stored digest for ``username``."""
        user = self.users.get(username)
        if user is None:
            check_password_hash(self._dummy_hash, password)
            return False
        return check_password_hash(user.password_hash, password)
