"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class InvalidAssertionError(DomainError):
    """External identity assertion is missing required data."""

    pass


class UnsupportedProviderError(InvalidAssertionError):
    """Raised when no client is configured for a provider."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class CredentialError(DomainError):
    """Base for every authentication failure.

    Callers must not be told which subclass occurred.
    """

    pass


class ExpiredTokenError(CredentialError):
    """Token is past its expiry."""

    pass


class InvalidSignatureError(CredentialError):
    """Token signature does not match the configured secret."""

    pass


class MalformedTokenError(CredentialError):
    """Token is structurally invalid or carries unexpected claims."""

    pass


class RevokedTokenError(CredentialError):
    """Token was explicitly revoked before its natural expiry."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class UserNotFoundError(NotFoundError):
    """Raised when a referenced user no longer exists."""

    def __init__(self, identifier: str):
        super().__init__("User", identifier)


class ConflictError(DomainError):
    """A write violated a uniqueness rule."""

    def __init__(self, resource: str, detail: str):
        self.resource = resource
        super().__init__(f"{resource} conflict: {detail}")


class StoreUnavailableError(DomainError):
    """A backing store failed or timed out."""

    def __init__(self, store: str, operation: str, cause: Exception | None = None):
        self.store = store
        self.operation = operation
        self.cause = cause
        message = f"{store} unavailable during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class RevocationFailedError(DomainError):
    """A required revocation step could not be completed."""

    def __init__(self, step: str, cause: Exception):
        self.step = step
        self.cause = cause
        super().__init__(f"Revocation step '{step}' failed: {cause}")
