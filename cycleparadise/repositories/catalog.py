import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cycleparadise.core.errors import ValidationError, DatabaseError
from cycleparadise.db.models import TourPackage, CyclingGuide

logger = logging.getLogger(__name__)


class TourPackageRepository:
	def __init__(self, db: Session):
		self.db = db

	def find_by_slug(self, slug: str) -> Optional[TourPackage]:
		"""Resolve the slug used in public URLs to the package row."""
		if not slug:
			return None
		try:
			return self.db.query(TourPackage).filter(TourPackage.slug == slug).first()
		except SQLAlchemyError:
			logger.exception("Error finding package by slug")
			return None

	def find_active(
		self,
		page: int = 1,
		per_page: int = 20,
		region: Optional[str] = None,
		featured: Optional[bool] = None,
	) -> tuple[list[TourPackage], int]:
		query = self.db.query(TourPackage).filter(TourPackage.is_active.is_(True))
		if region:
			query = query.filter(TourPackage.region.icontains(region, autoescape=True))
		if featured is not None:
			query = query.filter(TourPackage.featured.is_(featured))
		try:
			total = query.count()
			offset = (page - 1) * per_page
			packages = (
				query.order_by(TourPackage.featured.desc(), TourPackage.title.asc())
				.offset(offset)
				.limit(per_page)
				.all()
			)
		except SQLAlchemyError:
			logger.exception("Error finding packages")
			raise ValidationError("Failed to retrieve packages")
		return packages, total

	def count_active(self) -> int:
		try:
			return self.db.query(TourPackage).filter(TourPackage.is_active.is_(True)).count()
		except SQLAlchemyError as e:
			logger.exception("Error counting packages")
			raise DatabaseError(str(e))


class CyclingGuideRepository:
	def __init__(self, db: Session):
		self.db = db

	def find_published(self, page: int = 1, per_page: int = 20, region: Optional[str] = None) -> tuple[list[CyclingGuide], int]:
		query = self.db.query(CyclingGuide).filter(CyclingGuide.is_published.is_(True))
		if region:
			query = query.filter(CyclingGuide.region.icontains(region, autoescape=True))
		try:
			total = query.count()
			guides = (
				query.order_by(CyclingGuide.featured.desc(), CyclingGuide.title.asc())
				.offset((page - 1) * per_page)
				.limit(per_page)
				.all()
			)
		except SQLAlchemyError:
			logger.exception("Error finding guides")
			raise ValidationError("Failed to retrieve guides")
		return guides, total

	def find_by_slug(self, slug: str) -> Optional[CyclingGuide]:
		try:
			return (
				self.db.query(CyclingGuide)
				.filter(CyclingGuide.slug == slug, CyclingGuide.is_published.is_(True))
				.first()
			)
		except SQLAlchemyError:
			logger.exception("Error finding guide by slug")
			raise ValidationError("Failed to retrieve guide")
