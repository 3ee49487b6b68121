from enum import Enum


class ErrorCode(str, Enum):
    # ---------------- GENERIC ----------------
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # ---------------- INPUT ----------------
    INVALID_INPUT = "INVALID_INPUT"
    UNAUTHENTICATED = "UNAUTHENTICATED"

    # ---------------- AUTH ----------------
    EMAIL_EXISTS = "EMAIL_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # ---------------- PRODUCTS ----------------
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    PRODUCT_SKU_EXISTS = "PRODUCT_SKU_EXISTS"

    # ---------------- INVENTORY ----------------
    BATCH_NOT_FOUND = "BATCH_NOT_FOUND"
    BATCH_EXISTS = "BATCH_EXISTS"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    REMOTE_FAILURE = "REMOTE_FAILURE"

    # ---------------- REQUESTS ----------------
    MISSING_LOCATION = "MISSING_LOCATION"
    INVALID_ITEM = "INVALID_ITEM"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    REQUEST_NOT_PENDING = "REQUEST_NOT_PENDING"
    PARTIAL_FULFILLMENT = "PARTIAL_FULFILLMENT"

    # ---------------- LOCATIONS ----------------
    INCOMPLETE_LOCATION = "INCOMPLETE_LOCATION"
    LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"

    # ---------------- ORDERS ----------------
    ORDER_ID_REQUIRED = "ORDER_ID_REQUIRED"
    ORDER_EXISTS = "ORDER_EXISTS"

    # ---------------- BACKUP ----------------
    INVALID_BACKUP_FORMAT = "INVALID_BACKUP_FORMAT"
    BACKUP_REQUIRED = "BACKUP_REQUIRED"
