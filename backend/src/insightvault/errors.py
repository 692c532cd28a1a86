"""Exception types shared across the store, gateway and services."""


class InsightVaultError(Exception):
    """Base class for all InsightVault errors."""


class StorageUnavailable(InsightVaultError):
    """The environment cannot provide persistent storage."""


class StorageIOError(InsightVaultError):
    """A single read or write against the local store failed."""


class GenerationError(InsightVaultError):
    """The text-generation call failed (transport, auth or quota)."""


class ValidationError(InsightVaultError):
    """User-supplied input is missing a required field."""
