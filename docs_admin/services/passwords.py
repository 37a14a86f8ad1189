import secrets

import bcrypt

from docs_admin.errors import ValidationError


class PasswordHasher:
    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        encoded = password.encode("utf-8")
        if len(encoded) > 72:
            raise ValidationError("Password must be at most 72 bytes")
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Over-long passwords and malformed hashes never match.
            return False


def generate_password(length: int = 16) -> str:
    return secrets.token_urlsafe(length)[:length]
