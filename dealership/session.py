from dataclasses import dataclass
from typing import Optional

from dealership.utils.formatting import normalize

# Canonical role names
MECHANIC = "MECHANIC"
CHIEF_MECHANIC = "CHIEF_MECHANIC"
SALES = "SALES"
OWNER = "OWNER"

ROLE_ALIASES = {
    "MECHANIC_BOSS": CHIEF_MECHANIC,
    "BOSS_MECHANIC": CHIEF_MECHANIC,
}


def canonical_role(role_name: Optional[str]) -> str:
    """Trim/upper a stored role name and fold the chief mechanic aliases."""
    role = normalize(role_name)
    return ROLE_ALIASES.get(role, role)


@dataclass(frozen=True)
class SessionContext:
    """
    Who is calling: resolved once per request from the bearer token and
    passed explicitly to every handler that needs it.
    """
    user_id: int
    role: str
    dealership_id: int
    full_name: str = ""
    token_id: Optional[int] = None
