"""
Ordering Service — Admin login

Customers sign in with the hosted auth provider, whose tokens share
JWT_SECRET_KEY. Only the admin dashboard logs in here.
"""
import logging

from fastapi import APIRouter, HTTPException, status

from ordering.core.config import get_settings
from ordering.core.security import ADMIN_ROLE, create_access_token, verify_password
from ordering.schemas.auth import AdminLoginRequest, TokenResponse

settings = get_settings()
logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/admin/login", response_model=TokenResponse)
async def admin_login(payload: AdminLoginRequest):
    """Validate admin credentials and issue an admin JWT."""
    email_ok = payload.email.lower() == settings.ADMIN_EMAIL.lower()
    if not email_ok or not verify_password(payload.password, settings.ADMIN_PASSWORD_HASH):
        logger.warning("Failed admin login for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token({"sub": settings.ADMIN_EMAIL, "email": settings.ADMIN_EMAIL, "role": ADMIN_ROLE})
    return TokenResponse(access_token=token, expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60)
