from fastapi import HTTPException
from warehouse.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(AppException):
    """Missing or malformed user input. The caller is expected to re-prompt."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict | None = None,
    ):
        status_code = 401 if error_code == ErrorCode.UNAUTHENTICATED else 400
        super().__init__(status_code, message, error_code, details)


class InsufficientInventoryError(AppException):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(409, message, ErrorCode.INSUFFICIENT_INVENTORY, details)


class BatchNotFoundError(AppException):
    """Raised by the inventory store when a batch id does not exist.

    Outbound fulfillment and stock adjustments recover from it once by
    creating the batch and retrying the update.
    """

    def __init__(self, batch_id: str, details: dict | None = None):
        super().__init__(
            404,
            f"Inventory batch {batch_id} not found",
            ErrorCode.BATCH_NOT_FOUND,
            details,
        )
        self.batch_id = batch_id


class RemoteFailureError(AppException):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(502, message, ErrorCode.REMOTE_FAILURE, details)


class InvalidBackupFormatError(AppException):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(400, message, ErrorCode.INVALID_BACKUP_FORMAT, details)


class BackupRequiredError(AppException):
    def __init__(self, message: str = "Create a backup in this session before restoring"):
        super().__init__(409, message, ErrorCode.BACKUP_REQUIRED)
