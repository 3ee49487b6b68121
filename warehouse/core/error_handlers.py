# warehouse/core/error_handlers.py

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from warehouse.constants.error_codes import ErrorCode
from warehouse.core.exceptions import AppException
from warehouse.utils.response import error_response
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


# -------------------------
# DOMAIN ERRORS
# -------------------------
async def app_exception_handler(request: Request, exc: AppException):
    # Only RemoteFailureError carries a 5xx status.
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request failed",
        extra={
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_code": exc.error_code.value,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, exc.error_code, exc.details),
    )


# -------------------------
# REQUEST BODY VALIDATION
# -------------------------
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=error_response("Invalid request data", ErrorCode.VALIDATION_ERROR, exc.errors()),
    )


# -------------------------
# PLAIN HTTP ERRORS (404 routes, 405 ...)
# -------------------------
HTTP_STATUS_TO_ERROR_CODE = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.PERMISSION_DENIED,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
}


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error_code = HTTP_STATUS_TO_ERROR_CODE.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail), error_code),
    )


# -------------------------
# DB CONSTRAINTS
# -------------------------
# Constraint fragments as they appear in sqlite and postgres messages.
CONSTRAINT_ERROR_CODES = (
    ("uq_product_merchant_sku", ErrorCode.PRODUCT_SKU_EXISTS),
    ("products.merchant_id, products.sku", ErrorCode.PRODUCT_SKU_EXISTS),
    ("users.email", ErrorCode.EMAIL_EXISTS),
    ("ix_users_email", ErrorCode.EMAIL_EXISTS),
    ("inventory_batches.id", ErrorCode.BATCH_EXISTS),
    ("orders.id", ErrorCode.ORDER_EXISTS),
)


def _constraint_error_code(exc: IntegrityError) -> ErrorCode:
    text = str(exc.orig)
    for fragment, code in CONSTRAINT_ERROR_CODES:
        if fragment in text:
            return code
    return ErrorCode.CONFLICT


async def integrity_error_handler(request: Request, exc: IntegrityError):
    error_code = _constraint_error_code(exc)
    logger.warning(
        "Constraint violation",
        extra={"path": request.url.path, "error_code": error_code.value, "error": str(exc.orig)},
    )
    return JSONResponse(
        status_code=409,
        content=error_response("Database constraint violation", error_code),
    )


# -------------------------
# LAST RESORT
# -------------------------
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=500,
        content=error_response("Something went wrong. Please try again.", ErrorCode.INTERNAL_ERROR),
    )


# -------------------------
# REGISTRATION
# -------------------------
def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
