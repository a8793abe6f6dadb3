from fastapi import APIRouter, Depends

from incident_hub.api.deps import (
    get_auth_service,
    get_current_principal,
    get_session_token,
)
from incident_hub.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from incident_hub.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


# =========================
# Register
# =========================
@router.post("/register", response_model=LoginResponse, status_code=201)
async def register(body: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    return await auth.register(body.email, body.password)


# =========================
# Login
# =========================
@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    return await auth.login(body.email, body.password)


# =========================
# Logout (clears cached profile)
# =========================
@router.post("/logout")
async def logout(
    principal_id: str = Depends(get_current_principal),
    token: str = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
):
    await auth.logout(token, principal_id)
    return {"ok": True}
