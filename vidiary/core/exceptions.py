"""
Custom exception classes for the Vidiary catalog.
Storage errors mirror the failure modes of the durable store so callers can
decide whether a failure is fatal (init), recoverable (read/write) or a
programming defect (constraint).
"""


class VidiaryException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "error"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class StorageError(VidiaryException):
    """Base class for durable store failures."""

    def __init__(self, operation: str, error: str, code: str = "storage_error"):
        super().__init__(
            message=f"Storage {operation} failed: {error}",
            code=code
        )
        self.operation = operation
        self.error = error


class StorageInitError(StorageError):
    """Raised when the backing store cannot be opened or its schema created. Fatal."""

    def __init__(self, error: str):
        super().__init__(operation="initialize", error=error, code="storage_init")


class StorageReadError(StorageError):
    """Raised when reading from the store fails. Recoverable."""

    def __init__(self, operation: str, error: str):
        super().__init__(operation=operation, error=error, code="storage_read")


class StorageWriteError(StorageError):
    """Raised when a write to the store fails. The mutation must be assumed not applied."""

    def __init__(self, operation: str, error: str):
        super().__init__(operation=operation, error=error, code="storage_write")


class StorageConstraintError(StorageError):
    """Raised on a primary-key or other constraint violation (e.g. duplicate id)."""

    def __init__(self, video_id: str, error: str):
        super().__init__(
            operation="insert",
            error=f"constraint violated for video {video_id}: {error}",
            code="storage_constraint"
        )
        self.video_id = video_id


class ValidationException(VidiaryException):
    """Raised when entry data validation fails."""

    def __init__(self, message: str):
        super().__init__(
            message=f"Validation error: {message}",
            code="validation"
        )


class FileOperationException(VidiaryException):
    """Raised when file operations fail."""

    def __init__(self, operation: str, path: str, error: str):
        super().__init__(
            message=f"File {operation} failed for {path}: {error}",
            code="file_operation"
        )
        self.operation = operation
        self.path = path
        self.error = error


class VideoProcessingException(VidiaryException):
    """Raised when video processing (cropping, thumbnailing) fails."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Video processing error during {operation}: {error}",
            code="video_processing"
        )
        self.operation = operation
        self.error = error
