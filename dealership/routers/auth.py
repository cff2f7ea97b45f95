# dealership/routers/auth.py

from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, status, HTTPException, Header
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session, joinedload

# --- Project Imports ---
from dealership import models, schemas
from dealership.database import get_db
from dealership.config import get_settings
from dealership.repositories import users as users_repo
from dealership.session import SessionContext, canonical_role
from dealership.utils import unique_string, utcnow

# Security & Auth Logic
from dealership.security import (
    generate_token,
    get_token_payload,
    str_decode,
    str_encode
)
from dealership.oauth2 import get_current_session

logger = logging.getLogger(__name__)

# Load settings
settings = get_settings()

router = APIRouter(
    prefix="/api/v1",
    tags=['Auth & Session']
)

# =================================================================================
# HELPER FUNCTIONS (Internal)
# =================================================================================

def _generate_tokens_helper(user_id: int, username: str, role_name: str, dealership_id: int, db: Session):
    """
    Internal helper to generate Access and Refresh tokens and save to DB.
    """
    refresh_key = unique_string(100)
    access_key = unique_string(50)
    rt_expires = timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)

    # Create UserToken entry
    user_token = models.UserToken(
        user_id=user_id,
        refresh_key=refresh_key,
        access_key=access_key,
        expires_at=utcnow() + rt_expires,
    )

    db.add(user_token)
    db.commit()
    db.refresh(user_token)

    # Create Access Token
    at_payload = {
        "sub": str_encode(str(user_id)),
        'a': access_key,
        'r': str_encode(str(user_token.id)),
    }
    at_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = generate_token(at_payload, settings.JWT_SECRET, settings.JWT_ALGORITHM, at_expires)

    # Create Refresh Token
    rt_payload = {"sub": str_encode(str(user_id)), "t": refresh_key, 'a': access_key}
    refresh_token = generate_token(rt_payload, settings.SECRET_KEY, settings.JWT_ALGORITHM, rt_expires)

    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "expires_in": int(at_expires.total_seconds()),
        "user_id": user_id,
        "username": username,
        "role": canonical_role(role_name),
        "dealership_id": dealership_id,
    }


# =================================================================================
# AUTHENTICATION ENDPOINTS
# =================================================================================

@router.post("/auth/login", status_code=status.HTTP_200_OK, response_model=schemas.LoginResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    Authenticate a user and return tokens.
    Unknown user, wrong password and inactive account give the same answer.
    """
    user = users_repo.authenticate(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password.")

    logger.info("User %s logged in", user.id)
    return _generate_tokens_helper(user.id, form_data.username.strip(), user.role_name, user.dealership_id, db)


@router.post("/auth/refresh", status_code=status.HTTP_200_OK, response_model=schemas.LoginResponse)
def refresh_token(
    refresh_token: str = Header(..., alias="refresh_token", convert_underscores=False),
    db: Session = Depends(get_db)
):
    """
    Refresh access token using a valid refresh token. The old pair stops working.
    """
    token_payload = get_token_payload(refresh_token, settings.SECRET_KEY, settings.JWT_ALGORITHM)
    if not token_payload:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token.")

    refresh_key = token_payload.get('t')
    access_key = token_payload.get('a')
    try:
        user_id = int(str_decode(token_payload.get('sub')))
    except (AttributeError, TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token.")

    user_token = db.query(models.UserToken).options(
        joinedload(models.UserToken.user).joinedload(models.User.role)
    ).filter(
        models.UserToken.refresh_key == refresh_key,
        models.UserToken.access_key == access_key,
        models.UserToken.user_id == user_id,
        models.UserToken.expires_at > utcnow()
    ).first()

    if not user_token or not user_token.user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token.")

    user_token.expires_at = utcnow()
    db.add(user_token)
    db.commit()

    user = user_token.user
    return _generate_tokens_helper(
        user.id, user.username, user.role.name if user.role else "", user.dealership_id, db
    )


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Ends the current session: the token row expires and both tokens stop working."""
    db.query(models.UserToken).filter(
        models.UserToken.id == session.token_id
    ).update({models.UserToken.expires_at: utcnow()}, synchronize_session=False)
    db.commit()
    logger.info("User %s logged out", session.user_id)


# =================================================================================
# SESSION
# =================================================================================

@router.get("/users/me", response_model=schemas.SessionOut)
def get_current_session_profile(
    session: SessionContext = Depends(get_current_session)
):
    return schemas.SessionOut(
        user_id=session.user_id,
        full_name=session.full_name,
        role=session.role,
        dealership_id=session.dealership_id,
    )
