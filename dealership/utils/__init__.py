# dealership/utils/__init__.py
import secrets
import string
from datetime import datetime, timezone

def unique_string(length: int) -> str:
    """Random alphanumeric string of the given size, used for token keys."""
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))

def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column is compared in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
