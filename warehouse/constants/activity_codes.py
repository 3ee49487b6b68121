from enum import Enum


class ActivityCode(str, Enum):
    # AUTH
    REGISTER = "REGISTER"
    LOGIN = "LOGIN"

    # PRODUCTS
    CREATE_PRODUCT = "CREATE_PRODUCT"
    UPDATE_PRODUCT = "UPDATE_PRODUCT"
    DELETE_PRODUCT = "DELETE_PRODUCT"

    # INVENTORY
    ADD_INVENTORY = "ADD_INVENTORY"
    ADJUST_STOCK = "ADJUST_STOCK"
    DELETE_INVENTORY = "DELETE_INVENTORY"
    REFRESH_EXPIRY = "REFRESH_EXPIRY"

    # REQUESTS
    SUBMIT_INBOUND = "SUBMIT_INBOUND"
    SUBMIT_OUTBOUND = "SUBMIT_OUTBOUND"
    COMPLETE_REQUEST = "COMPLETE_REQUEST"
    CANCEL_REQUEST = "CANCEL_REQUEST"

    # LOCATIONS
    CREATE_LOCATION = "CREATE_LOCATION"
    UPDATE_LOCATION = "UPDATE_LOCATION"
    DELETE_LOCATION = "DELETE_LOCATION"

    # ORDERS
    CREATE_ORDER = "CREATE_ORDER"

    # BACKUP
    EXPORT_BACKUP = "EXPORT_BACKUP"
    RESTORE_BACKUP = "RESTORE_BACKUP"
