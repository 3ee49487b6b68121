from warehouse.constants.activity_codes import ActivityCode


ACTIVITY_TEMPLATES = {
    # ---------------- AUTH ----------------
    ActivityCode.REGISTER:
        "{actor_email} registered as {actor_role} ({company_name})",

    ActivityCode.LOGIN:
        "{actor_role} ({actor_email}) logged in",

    # ---------------- PRODUCTS ----------------
    ActivityCode.CREATE_PRODUCT:
        "{actor_role} ({actor_email}) created product {target_name} ({sku})",

    ActivityCode.UPDATE_PRODUCT:
        "{actor_role} ({actor_email}) updated product {target_name}: {changes}",

    ActivityCode.DELETE_PRODUCT:
        "{actor_role} ({actor_email}) deleted product {target_name} and {batch_count} batches",

    # ---------------- INVENTORY ----------------
    ActivityCode.ADD_INVENTORY:
        "{actor_role} ({actor_email}) added {quantity} units of product {product_id} "
        "to batch {target_name}",

    ActivityCode.ADJUST_STOCK:
        "{actor_role} ({actor_email}) adjusted batch {target_name} by {quantity_change} "
        "({reason}); new quantity {new_quantity}",

    ActivityCode.DELETE_INVENTORY:
        "{actor_role} ({actor_email}) deleted batch {target_name} of product {product_id}",

    ActivityCode.REFRESH_EXPIRY:
        "{actor_role} ({actor_email}) refreshed expiry status on {changed} batches",

    # ---------------- REQUESTS ----------------
    ActivityCode.SUBMIT_INBOUND:
        "{actor_role} ({actor_email}) submitted inbound request {target_name} "
        "({total_weight_kg} kg, fee {fee})",

    ActivityCode.SUBMIT_OUTBOUND:
        "{actor_role} ({actor_email}) submitted outbound request {target_name} "
        "({total_weight_kg} kg, fee {fee})",

    ActivityCode.COMPLETE_REQUEST:
        "{actor_role} ({actor_email}) completed {request_type} request {target_name} (fee {fee})",

    ActivityCode.CANCEL_REQUEST:
        "{actor_role} ({actor_email}) cancelled {request_type} request {target_name}",

    # ---------------- LOCATIONS ----------------
    ActivityCode.CREATE_LOCATION:
        "{actor_role} ({actor_email}) saved location {target_name}",

    ActivityCode.UPDATE_LOCATION:
        "{actor_role} ({actor_email}) updated location {target_name}: {changes}",

    ActivityCode.DELETE_LOCATION:
        "{actor_role} ({actor_email}) deleted location {target_name}",

    # ---------------- ORDERS ----------------
    ActivityCode.CREATE_ORDER:
        "Order {target_name} stored for merchant {merchant_id}",

    # ---------------- BACKUP ----------------
    ActivityCode.EXPORT_BACKUP:
        "{actor_role} ({actor_email}) exported {key_count} state keys",

    ActivityCode.RESTORE_BACKUP:
        "{actor_role} ({actor_email}) restored state keys: {restored}",
}
