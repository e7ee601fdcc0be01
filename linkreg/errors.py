"""Error types raised by the link registry."""


class LinkRegistryError(Exception):
    """Base class for all registry errors."""


class InvalidTarget(LinkRegistryError, ValueError):
    """Target URL is missing or not an absolute URL."""


class InvalidCode(LinkRegistryError, ValueError):
    """Caller-supplied short code has the wrong shape."""


class CodeConflict(LinkRegistryError):
    """Requested short code is already taken by a live link."""

    def __init__(self, code: str):
        super().__init__(f"Short code '{code}' already exists")
        self.code = code


class ExhaustedCodeSpace(LinkRegistryError):
    """Every generated candidate collided with an existing code.

    Retryable: a later attempt draws fresh candidates.
    """

    def __init__(self, attempts: int):
        super().__init__(f"Unable to generate a unique short code after {attempts} attempts")
        self.attempts = attempts


class LinkNotFound(LinkRegistryError, LookupError):
    """No live link has the given code."""

    def __init__(self, code: str):
        super().__init__(f"Short code '{code}' not found")
        self.code = code


class StorageFailure(LinkRegistryError):
    """Backing store error not otherwise classified."""
