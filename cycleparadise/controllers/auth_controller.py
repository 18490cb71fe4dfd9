from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cycleparadise.db.models import AdminUser
from cycleparadise.db.session import get_db
from cycleparadise.schemas import LoginRequest, TokenResponse, AdminUserResponse, SuccessResponse
from cycleparadise.services.auth_service import AuthService, get_token_payload

router = APIRouter(prefix="/api/admin/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
	token, session = AuthService.login(email=payload.email, password=payload.password, db=db, remember=payload.remember)
	return TokenResponse(
		access_token=token,
		expires_at=session.expires_at,
		user=AdminUserResponse.model_validate(session.admin),
	)


@router.post("/logout", response_model=SuccessResponse)
def logout(payload: dict = Depends(get_token_payload), db: Session = Depends(get_db)):
	AuthService.logout(payload, db)
	return SuccessResponse(message="Logged out")


@router.get("/session", response_model=AdminUserResponse)
def current_session(admin: AdminUser = Depends(AuthService.get_current_admin)):
	return AdminUserResponse.model_validate(admin)
