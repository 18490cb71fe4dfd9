import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv(".env")


def _env_list(name: str, default: str) -> list[str]:
	raw = os.getenv(name, default)
	return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
	app_env: str = os.getenv("APP_ENV", "development")
	host: str = os.getenv("APP_HOST", "0.0.0.0")
	port: int = int(os.getenv("APP_PORT", "8000"))
	log_level: str = os.getenv("LOG_LEVEL", "INFO")

	database_url: str = os.getenv("DATABASE_URL", "sqlite:///./cycleparadise.db")
	create_tables: bool = os.getenv("CREATE_TABLES", "true").lower() in ("1", "true", "yes")

	jwt_secret: str = os.getenv("JWT_SECRET", "change-this-in-production")
	jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
	# Admin login sessions: 24 hours, or 14 days with "remember me"
	session_hours: int = int(os.getenv("SESSION_HOURS", "24"))
	remember_days: int = int(os.getenv("REMEMBER_DAYS", "14"))

	smtp_host: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
	smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
	smtp_user: str = os.getenv("SMTP_USER", "")
	smtp_password: str = os.getenv("SMTP_PASSWORD", "")
	from_email: str = os.getenv("FROM_EMAIL", "noreply@cycleparadise.lk")
	contact_email: str = os.getenv("CONTACT_EMAIL", "info@cycleparadise.lk")
	admin_email: str = os.getenv("ADMIN_EMAIL", "admin@cycleparadise.lk")

	cors_origins: list[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))

	@property
	def is_production(self) -> bool:
		return self.app_env == "production"

settings = Settings()
