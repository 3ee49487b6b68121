def format_location(location) -> str:
    """Single-line address: "building, location, pincode, Phone: n"."""
    if not location:
        return "-"

    if isinstance(location, dict):
        get = location.get
    else:
        def get(name):
            return getattr(location, name, None)

    parts = [get("building_number"), get("location"), get("pincode")]
    text = ", ".join(str(p) for p in parts if p)
    phone = get("phone")
    if phone:
        text = f"{text}, Phone: {phone}" if text else f"Phone: {phone}"
    return text or "-"
