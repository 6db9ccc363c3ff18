"""
Secret tokens.

A secret is a 16-character alphanumeric token handed out with the full AI
guide. Mutating tools require a live secret; expired ones are removed from
the store the next time secrets are looked at.
"""

import re
import secrets
import string
import time
from datetime import datetime, timedelta, timezone

from thinkmem.core.errors import InvalidSecretError, MissingSecretError
from thinkmem.core.logging import get_logger
from thinkmem.storage.json_store import JsonStorage, Secret

logger = get_logger("auth.secrets")

SECRET_LENGTH = 16
ALPHABET = string.ascii_letters + string.digits
SECRET_RE = re.compile(rf"^[A-Za-z0-9]{{{SECRET_LENGTH}}}$")


class SecretManager:
    """Issue and check secrets stored in a JsonStorage."""

    def __init__(self, storage: JsonStorage, ttl_hours: float = 1.0):
        self.storage = storage
        self.ttl = timedelta(hours=ttl_hours)

    @staticmethod
    def generate_secret() -> str:
        return "".join(secrets.choice(ALPHABET) for _ in range(SECRET_LENGTH))

    @staticmethod
    def is_valid_format(secret: str) -> bool:
        return bool(SECRET_RE.match(secret or ""))

    @staticmethod
    def _new_secret_id() -> str:
        return f"secret_{int(time.time() * 1000)}_{secrets.token_hex(5)}"

    async def issue(self) -> Secret:
        """Create, store and return a fresh secret."""
        now = datetime.now(timezone.utc)
        record = await self.storage.add_secret(
            self._new_secret_id(),
            self.generate_secret(),
            expires_at=now + self.ttl,
            created_at=now,
        )
        logger.info(f"Issued secret {record.secret_id} (expires {record.expires_at.isoformat()})")
        return record

    async def validate(self, secret: str | None) -> None:
        """Raise unless ``secret`` is a stored, unexpired token."""
        if not secret:
            raise MissingSecretError(
                "Missing secret token. Read the full thinkmem_guide to obtain one."
            )
        if not self.is_valid_format(secret):
            raise InvalidSecretError(
                "Invalid secret token format. Obtain a new secret from thinkmem_guide."
            )
        if not await self.storage.validate_secret(secret):
            raise InvalidSecretError(
                "Invalid or expired secret token. Obtain a new secret from thinkmem_guide."
            )
