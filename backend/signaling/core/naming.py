"""Generated names for rooms and participants."""

import time
from uuid import uuid4


def generate_name(prefix: str) -> str:
    """
    Build a placeholder name such as ``room-1718000000-3f2a9c``.

    The timestamp keeps names readable and roughly ordered; the random
    suffix keeps two names generated within the same second distinct.
    """
    return f"{prefix}-{int(time.time())}-{uuid4().hex[:6]}"
