# diabetes_backend/routes/admin_routes.py
import hmac
import logging

from fastapi import APIRouter, Body, HTTPException, Request

from diabetes_backend.auth.jwt import create_access_token, verify_password
from diabetes_backend.schemas.auth import AdminLogin, Token

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger("diabetes")


@router.post("/login", response_model=Token)
def login(request: Request, payload: AdminLogin = Body(...)):
    settings = request.app.state.settings
    known_user = hmac.compare_digest(payload.username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    if not known_user or not verify_password(payload.password, request.app.state.admin_password_hash):
        logger.info({"function": "admin_login", "status": "rejected", "username": payload.username})
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = create_access_token(
        {"sub": settings.ADMIN_USERNAME, "role": "admin"},
        settings.JWT_SECRET,
        expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    logger.info({"function": "admin_login", "status": "ok", "username": payload.username})
    return Token(access_token=token, expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60)
