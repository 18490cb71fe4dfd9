import logging
from datetime import timedelta

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from cycleparadise.core.config import settings
from cycleparadise.core.errors import AuthenticationError
from cycleparadise.core.security import verify_password, create_access_token, decode_access_token, generate_session_id
from cycleparadise.db.session import get_db
from cycleparadise.db.models import AdminUser, AdminSession, utcnow

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_token_payload(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
	if not credentials:
		raise AuthenticationError("Unauthorized")
	payload = decode_access_token(credentials.credentials)
	if not payload or "sub" not in payload or "sid" not in payload:
		raise AuthenticationError("Invalid token", code="INVALID_TOKEN")
	return payload


class AuthService:
	@staticmethod
	def authenticate(email: str, password: str, db: Session) -> AdminUser | None:
		user = db.query(AdminUser).filter(AdminUser.email == email.lower().strip()).first()
		if not user or not user.is_active or not verify_password(password, user.password_hash):
			return None
		return user

	@staticmethod
	def login(email: str, password: str, db: Session, remember: bool = False) -> tuple[str, AdminSession]:
		user = AuthService.authenticate(email, password, db)
		if user is None:
			raise AuthenticationError("Invalid email or password", code="INVALID_CREDENTIALS")

		removed = AuthService.cleanup_expired_sessions(db)
		if removed:
			logger.info("Removed %s expired admin sessions", removed)

		now = utcnow()
		lifetime = timedelta(days=settings.remember_days) if remember else timedelta(hours=settings.session_hours)
		session = AdminSession(
			id=generate_session_id(),
			admin_user_id=user.id,
			data={"email": user.email, "role": user.role.value},
			expires_at=now + lifetime,
		)
		db.add(session)
		user.last_login_at = now
		db.commit()
		logger.info("Admin %s logged in", user.email)
		return create_access_token(subject=str(user.id), session_id=session.id, expires_at=session.expires_at), session

	@staticmethod
	def logout(token_payload: dict, db: Session) -> bool:
		session = db.get(AdminSession, token_payload.get("sid"))
		if session is None:
			return False
		db.delete(session)
		db.commit()
		return True

	@staticmethod
	def cleanup_expired_sessions(db: Session) -> int:
		removed = db.query(AdminSession).filter(AdminSession.expires_at < utcnow()).delete(synchronize_session=False)
		db.commit()
		return removed

	@staticmethod
	def get_current_admin(
		payload: dict = Depends(get_token_payload),
		db: Session = Depends(get_db),
	) -> AdminUser:
		session = db.get(AdminSession, payload["sid"])
		if session is None or session.admin_user_id != int(payload["sub"]):
			raise AuthenticationError("Session not found", code="SESSION_NOT_FOUND")
		if session.expires_at < utcnow():
			db.delete(session)
			db.commit()
			raise AuthenticationError("Session expired", code="SESSION_EXPIRED")
		user = session.admin
		if not user.is_active:
			raise AuthenticationError("Account disabled", code="ACCOUNT_DISABLED")
		return user
