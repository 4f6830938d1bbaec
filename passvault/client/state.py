from typing import Optional
from passvault.core.models import UserRecord


class SessionState:
    """Per-window login state; the caller owns it and passes it around explicitly."""

    def __init__(self, user: Optional[UserRecord] = None):
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[int]:
        return self.user.id if self.user else None

    @property
    def username(self) -> Optional[str]:
        return self.user.username if self.user else None

    def clear(self):
        self.user = None
