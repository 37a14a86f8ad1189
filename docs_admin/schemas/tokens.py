from dataclasses import dataclass
from datetime import datetime


class TokenError(ValueError):
    pass


@dataclass(frozen=True)
class SessionClaim:
    id: str
    email: str
    name: str
    role: str
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
