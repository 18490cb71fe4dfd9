from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
import logging

from cycleparadise.core.config import Settings, settings as default_settings
from cycleparadise.core.errors import setup_exception_handlers
from cycleparadise.db.session import Database
from cycleparadise.routes.routes import include_app_routes
from cycleparadise.services.email_service import EmailService

logger = logging.getLogger(__name__)


def create_app(
	settings: Optional[Settings] = None,
	database: Optional[Database] = None,
	email_service: Optional[EmailService] = None,
) -> FastAPI:
	"""Build the API. Collaborators not passed in are built from settings at startup."""
	settings = settings or default_settings
	logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		db = database or Database(settings.database_url)
		try:
			db.ping()
			if settings.create_tables:
				db.create_all()
			logger.info("Database connection successful")
		except SQLAlchemyError as e:
			logger.error(f"Database connection failed: {e}")
			raise
		app.state.db = db
		app.state.email_service = email_service or EmailService.from_settings(settings)

		yield

		if database is None:
			db.dispose()
		logger.info("Shutting down Cycle Paradise API")

	# interactive docs stay off in production
	app = FastAPI(
		title="Cycle Paradise API",
		version="1.0.0",
		lifespan=lifespan,
		docs_url=None if settings.is_production else "/docs",
		redoc_url=None if settings.is_production else "/redoc",
	)

	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.cors_origins,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	setup_exception_handlers(app)
	include_app_routes(app)

	@app.get("/health")
	def health_check():
		return {"status": "ok"}

	return app


app = create_app()


if __name__ == "__main__":
	import uvicorn

	uvicorn.run(app, host=default_settings.host, port=default_settings.port)
