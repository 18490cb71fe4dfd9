import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
	status_code: int = 500
	error: str = "Internal Server Error"
	default_code: str = "INTERNAL_ERROR"

	def __init__(self, message: str, code: Optional[str] = None):
		super().__init__(message)
		self.message = message
		self.code = code or self.default_code


class ValidationError(AppError):
	"""Missing or invalid input. Also raised for lookups that found nothing."""

	status_code = 400
	error = "Validation Error"
	default_code = "VALIDATION_ERROR"

	def __init__(self, message: str, field: Optional[str] = None, code: Optional[str] = None):
		super().__init__(message, code=code)
		self.field = field


class NotFoundError(ValidationError):
	status_code = 404
	error = "Not Found"
	default_code = "NOT_FOUND"


class DatabaseError(AppError):
	status_code = 500
	error = "Database Error"
	default_code = "DATABASE_ERROR"


class AuthenticationError(AppError):
	status_code = 401
	error = "Authentication Error"
	default_code = "AUTH_ERROR"


def error_body(exc: AppError) -> dict:
	body = {"error": exc.error, "message": exc.message, "code": exc.code}
	if isinstance(exc, DatabaseError):
		# never leak driver messages to clients
		body["message"] = "A database error occurred"
	field = getattr(exc, "field", None)
	if field:
		body["field"] = field
	return body


def setup_exception_handlers(app: FastAPI) -> None:

	@app.exception_handler(AppError)
	async def app_error_handler(request: Request, exc: AppError):
		if exc.status_code >= 500:
			logger.error("API error on %s %s: %s", request.method, request.url.path, exc.message)
		headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
		return JSONResponse(status_code=exc.status_code, content=error_body(exc), headers=headers)

	@app.exception_handler(Exception)
	async def unhandled_error_handler(request: Request, exc: Exception):
		logger.exception("Unhandled error on %s %s", request.method, request.url.path)
		return JSONResponse(
			status_code=500,
			content={"error": "Internal Server Error", "message": "An unexpected error occurred", "code": "INTERNAL_ERROR"},
		)
