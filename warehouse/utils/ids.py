import time
from uuid import uuid4


def new_id(prefix: str) -> str:
    """Time-ordered string id, e.g. ``inv-1718000000000a1b2``."""
    return f"{prefix}-{int(time.time() * 1000)}{uuid4().hex[:4]}"
