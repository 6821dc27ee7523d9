"""Domain errors and failure typing."""


class NearbyError(Exception):
    """Base class for service failures."""

    error_code = "NEARBY_ERROR"


class ConfigError(NearbyError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class StorageError(NearbyError):
    """Base class for record store failures."""

    error_code = "STORAGE_ERROR"


class StoreOpenError(StorageError):
    """Raised when the store file cannot be opened. Unrecoverable."""

    error_code = "STORE_OPEN_ERROR"


class StorageWriteError(StorageError):
    """Raised when a single record cannot be serialised or persisted."""

    error_code = "STORAGE_WRITE_ERROR"


class NotFoundError(StorageError):
    """Raised when a partition or key is absent."""

    error_code = "NOT_FOUND"


class DeserializationError(StorageError):
    """Raised when stored bytes are corrupt or do not match the record shape."""

    error_code = "DESERIALIZATION_ERROR"


class NoCandidatesError(NearbyError):
    """Raised when the coordinate partition holds nothing to resolve against."""

    error_code = "NO_CANDIDATES"
