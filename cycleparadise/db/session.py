from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
import logging

logger = logging.getLogger(__name__)

class Base(DeclarativeBase):
	pass


class Database:
	"""Owns the engine and session factory for one application instance.

	Built by the application lifespan (or by a test) and handed to request
	handlers through ``app.state``; there is no module-level engine.
	"""

	def __init__(self, url: str, **engine_kwargs):
		self.url = url
		if url.startswith("sqlite"):
			engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
		else:
			engine_kwargs.setdefault("pool_pre_ping", True)
			engine_kwargs.setdefault("pool_recycle", 3600)
			engine_kwargs.setdefault("pool_timeout", 10)
		self.engine = create_engine(url, **engine_kwargs)
		self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False)
		logger.info("Database engine created for %s", self.engine.url.render_as_string(hide_password=True))

	def create_all(self) -> None:
		# models must be imported so their tables are registered on Base.metadata
		from cycleparadise.db import models  # noqa: F401
		Base.metadata.create_all(bind=self.engine)

	def ping(self) -> None:
		with self.engine.connect() as conn:
			conn.execute(text("SELECT 1"))

	def session(self) -> Session:
		return self.SessionLocal()

	def dispose(self) -> None:
		self.engine.dispose()
		logger.info("Database engine disposed")


def get_db(request: Request) -> Iterator[Session]:
	database: Database | None = getattr(request.app.state, "db", None)
	if database is None:
		raise RuntimeError("Database not available. Please check your database connection.")

	db = database.session()
	try:
		yield db
	finally:
		db.close()
