class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class DeviceError(DomainError):
    """Base for failures talking to the access-control server."""


class DeviceIOError(DeviceError):
    """Transport failure: unreachable host, timeout or non-2xx status.

    Retriable by the next scheduled run.
    """


class DeviceProtocolError(DeviceError):
    """The server answered, but not with the envelope we expect."""


class StorageError(DomainError):
    """A database operation failed."""
