import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.hash import bcrypt

from cycleparadise.core.config import settings


def hash_password(plain_password: str) -> str:
	return bcrypt.using(rounds=12).hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
	try:
		return bcrypt.verify(plain_password, hashed_password)
	except ValueError:
		# malformed or foreign hash
		return False


def generate_session_id() -> str:
	return secrets.token_urlsafe(32)


def create_access_token(subject: str, session_id: str, expires_at: Optional[datetime] = None) -> str:
	expire = expires_at or datetime.now(timezone.utc) + timedelta(hours=settings.session_hours)
	if expire.tzinfo is None:
		# stored timestamps are naive UTC
		expire = expire.replace(tzinfo=timezone.utc)
	to_encode = {"sub": subject, "sid": session_id, "exp": expire}
	return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[dict]:
	try:
		payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
		return payload
	except jwt.PyJWTError:
		return None
