from fastapi import APIRouter, Depends, status

from homeservices.api.deps import get_access_token, get_auth_service, get_current_actor
from homeservices.core.policy import Actor
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.user import (
    AuthData,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResendEmailOtpRequest,
    UserProfile,
    VerifyEmailOtpRequest,
)
from homeservices.services.auth_service import AuthResult, AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_data(result: AuthResult) -> dict:
    return {
        "user": result.user,
        "access_token": result.tokens.access_token,
        "refresh_token": result.tokens.refresh_token,
        "verification_email_sent": result.verification_email_sent,
    }


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    result = auth.register(payload.email, payload.password, payload.full_name)
    message = "User registered successfully"
    if not result.verification_email_sent:
        message += "; verification email could not be sent, please request a new code"
    return ok(_auth_data(result), message)


@router.post("/login", response_model=ApiResponse[AuthData])
def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    result = auth.login(payload.email, payload.password)
    return ok(_auth_data(result), "Login successful")


@router.post("/refresh", response_model=ApiResponse[AuthData])
def refresh(payload: RefreshRequest, auth: AuthService = Depends(get_auth_service)):
    result = auth.refresh(payload.refresh_token)
    return ok(_auth_data(result), "Token refreshed")


@router.post("/verify-email-otp", response_model=ApiResponse[AuthData])
def verify_email_otp(payload: VerifyEmailOtpRequest, auth: AuthService = Depends(get_auth_service)):
    result = auth.verify_email(payload.email, payload.otp)
    return ok(_auth_data(result), "Email verified successfully")


@router.post("/resend-email-otp", response_model=ApiResponse)
def resend_email_otp(payload: ResendEmailOtpRequest, auth: AuthService = Depends(get_auth_service)):
    auth.resend_email_otp(payload.email)
    return ok(message="Verification code sent")


@router.post("/logout", response_model=ApiResponse)
def logout(
    token: str = Depends(get_access_token),
    actor: Actor = Depends(get_current_actor),
    auth: AuthService = Depends(get_auth_service),
):
    auth.logout(actor, token)
    return ok(message="Logged out successfully")


@router.get("/profile", response_model=ApiResponse[UserProfile])
def profile(actor: Actor = Depends(get_current_actor), auth: AuthService = Depends(get_auth_service)):
    return ok(auth.profile(actor.user_id))
