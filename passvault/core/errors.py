from typing import Iterable


class VaultError(Exception):
    """Base class for every error raised by the vault engine."""


class ValidationFailed(VaultError):
    def __init__(self, message: str, failed: Iterable[str] = ()):
        super().__init__(message)
        self.failed = list(failed)


class InvalidLength(VaultError, ValueError):
    pass


class DuplicateUsername(VaultError):
    def __init__(self, username: str):
        super().__init__(f"Username already registered: {username}")
        self.username = username


class NotFound(VaultError):
    pass


class AuthFailed(VaultError):
    def __init__(self, message: str = "Incorrect username or password"):
        super().__init__(message)


class WeakPassword(VaultError):
    def __init__(self, category: str, failed: Iterable[str] = ()):
        super().__init__(f"Password strength is {category}, Strong is required")
        self.category = category
        self.failed = list(failed)


class StorageError(VaultError):
    pass
