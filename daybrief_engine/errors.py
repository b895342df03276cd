"""Error taxonomy shared by collectors, storage and account flows."""


class DaybriefError(Exception):
    """Root of every error raised by daybrief."""


class FetchError(DaybriefError):
    """A remote call could not produce usable data."""


class TransportError(FetchError):
    """Network failure, timeout or non-2xx response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(FetchError):
    """Malformed response body or image."""


class NotFoundError(DaybriefError):
    """No geocode match, unknown user."""


class StorageError(DaybriefError):
    """Filesystem I/O failure or corrupt file."""


class AuthError(DaybriefError):
    pass


class AlreadyExistsError(AuthError):
    def __init__(self, username: str = ""):
        super().__init__("User already exists")
        self.username = username


class InvalidCredentialError(AuthError):
    def __init__(self):
        super().__init__("Invalid PIN")


class UnknownUserError(AuthError, NotFoundError):
    def __init__(self, username: str = ""):
        super().__init__("User not found")
        self.username = username
