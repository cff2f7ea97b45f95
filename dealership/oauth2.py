import logging
from typing import List, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session, joinedload

from dealership.database import get_db
from dealership.config import get_settings
from dealership import models
from dealership.security import get_token_payload, str_decode
from dealership.session import SessionContext, canonical_role, MECHANIC, CHIEF_MECHANIC, SALES
from dealership.utils import utcnow

logger = logging.getLogger(__name__)

settings = get_settings()

# Where FastAPI looks for the token (Authorization: Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

# --- CORE SESSION RETRIEVAL LOGIC ---

def get_token_session(token: str, db: Session) -> Optional[SessionContext]:
    """
    Decodes the access token and verifies it against the UserToken table.
    A token is only valid while its UserToken row is unexpired and the user is active.
    """
    if not token:
        return None

    payload = get_token_payload(token, settings.JWT_SECRET, settings.JWT_ALGORITHM)
    if not payload:
        return None

    try:
        user_token_id = int(str_decode(payload.get('r')))
        user_id = int(str_decode(payload.get('sub')))
        access_key = payload.get('a')
    except (AttributeError, TypeError, ValueError):
        logger.warning("Malformed access token claims")
        return None

    user_token = db.query(models.UserToken).options(
        joinedload(models.UserToken.user).joinedload(models.User.role)
    ).filter(
        models.UserToken.access_key == access_key,
        models.UserToken.id == user_token_id,
        models.UserToken.user_id == user_id,
        models.UserToken.expires_at > utcnow()
    ).first()

    if not user_token or not user_token.user or not user_token.user.is_active:
        return None

    user = user_token.user
    return SessionContext(
        user_id=user.id,
        role=canonical_role(user.role.name if user.role else ""),
        dealership_id=user.dealership_id,
        full_name=(user.full_name or "").strip(),
        token_id=user_token.id,
    )


# --- DEPENDENCIES ---

def get_current_session(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> SessionContext:
    """
    Dependency for API Routes expecting a Header Token.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    session = get_token_session(token, db)
    if not session:
        raise credentials_exception

    return session


# --- ROLE CHECKERS ---

def require_role(allowed_roles: List[str]):
    """
    Factory for role-based permission checks.
    """
    allowed = [canonical_role(r) for r in allowed_roles]

    def role_checker(session: SessionContext = Depends(get_current_session)) -> SessionContext:
        if session.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Action requires one of the following roles: {', '.join(allowed)}"
            )
        return session
    return role_checker

# --- PRE-DEFINED DEPENDENCIES ---

require_mechanic_role = require_role([MECHANIC])
require_boss_role = require_role([CHIEF_MECHANIC])
require_sales_role = require_role([SALES])
