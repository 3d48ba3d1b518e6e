"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderFailureError(AdapterError):
    """External identity provider unreachable or returned unusable data.

    Retryable: the same authorization may succeed later.
    """

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")
