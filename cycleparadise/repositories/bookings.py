import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, Query, joinedload, selectinload

from cycleparadise.core.errors import ValidationError, NotFoundError, DatabaseError
from cycleparadise.db.models import (
	Booking, BookingAccommodation, BookingStatusHistory, TourPackage,
	BookingStatus, PaymentStatus, PaymentMethod, utcnow,
)
from cycleparadise.services.booking_number import generate_booking_number

logger = logging.getLogger(__name__)

# Upper bound on rows returned by a single export
EXPORT_LIMIT = 1000


@dataclass
class BookingCreateData:
	package_id: int
	customer_name: str
	customer_email: str
	customer_phone: str
	number_of_participants: int
	start_date: date
	end_date: date
	total_amount: Decimal | float
	customer_country: Optional[str] = None
	special_requests: Optional[str] = None
	payment_method: PaymentMethod = PaymentMethod.CASH


@dataclass
class BookingSearchParams:
	"""Every filter the admin booking list understands. ``None`` means unfiltered."""

	query: Optional[str] = None
	status: Optional[BookingStatus] = None
	payment_status: Optional[PaymentStatus] = None
	package_id: Optional[int] = None
	start_date: Optional[date] = None
	end_date: Optional[date] = None
	page: int = 1
	limit: int = 10


@dataclass
class BookingStats:
	pending: int = 0
	confirmed: int = 0
	cancelled: int = 0
	completed: int = 0

	@property
	def total(self) -> int:
		return self.pending + self.confirmed + self.cancelled + self.completed


@dataclass
class BookingSearchResult:
	bookings: list[Booking]
	total: int
	page: int
	limit: int
	has_more: bool
	stats: BookingStats = field(default_factory=BookingStats)


def _coerce(enum_cls, value, field_name: str):
	if value is None or isinstance(value, enum_cls):
		return value
	try:
		return enum_cls(value)
	except ValueError:
		raise ValidationError(f"Invalid {field_name.replace('_', ' ')} value", field=field_name)


class BookingRepository:
	"""Booking persistence: creation, lookups, status/payment transitions and listing."""

	def __init__(self, db: Session):
		self.db = db

	# ===== Create =====
	def create(self, data: BookingCreateData, now: Optional[datetime] = None) -> Booking:
		now = now or utcnow()
		try:
			package_exists = self.db.query(TourPackage.id).filter(TourPackage.id == data.package_id).first()
			if package_exists is None:
				raise NotFoundError("Package not found", code="PACKAGE_NOT_FOUND")

			booking_number = generate_booking_number(self.db, now)
			booking = Booking(
				booking_number=booking_number,
				package_id=data.package_id,
				customer_name=data.customer_name,
				customer_email=data.customer_email,
				customer_phone=data.customer_phone,
				customer_country=data.customer_country,
				number_of_participants=data.number_of_participants,
				start_date=data.start_date,
				end_date=data.end_date,
				special_requests=data.special_requests,
				total_amount=Decimal(str(data.total_amount)),
				status=BookingStatus.PENDING,
				payment_status=PaymentStatus.PENDING,
				payment_method=_coerce(PaymentMethod, data.payment_method, "payment_method") or PaymentMethod.CASH,
				submitted_at=now,
			)
			self.db.add(booking)
			self.db.commit()
			self.db.refresh(booking)
			logger.info("Booking %s created for package %s", booking.booking_number, booking.package_id)
			return booking
		except ValidationError:
			raise
		except SQLAlchemyError:
			self.db.rollback()
			logger.exception("Error creating booking")
			raise ValidationError("Failed to create booking")

	# ===== Filtering =====
	def _filtered(self, params: BookingSearchParams, with_status_filters: bool = True) -> Query:
		query = self.db.query(Booking)

		if params.query:
			# literal substring match; % and _ in the search text are not wildcards
			query = query.filter(or_(
				Booking.booking_number.icontains(params.query, autoescape=True),
				Booking.customer_name.icontains(params.query, autoescape=True),
				Booking.customer_email.icontains(params.query, autoescape=True),
			))
		if with_status_filters:
			if params.status:
				query = query.filter(Booking.status == _coerce(BookingStatus, params.status, "status"))
			if params.payment_status:
				query = query.filter(Booking.payment_status == _coerce(PaymentStatus, params.payment_status, "payment_status"))
		if params.package_id:
			query = query.filter(Booking.package_id == params.package_id)
		if params.start_date:
			query = query.filter(Booking.start_date >= params.start_date)
		if params.end_date:
			query = query.filter(Booking.end_date <= params.end_date)
		return query

	def _status_stats(self, params: BookingSearchParams) -> BookingStats:
		# Counts ignore pagination and the status/payment filters, so the
		# dashboard tabs show the whole population for the other filters.
		base = self._filtered(params, with_status_filters=False).with_entities(Booking.status, func.count(Booking.id))
		stats = BookingStats()
		for status, count in base.group_by(Booking.status).all():
			key = BookingStatus(status).value.lower()
			if hasattr(stats, key):
				setattr(stats, key, count)
		return stats

	# ===== Queries =====
	def find_many(self, params: Optional[BookingSearchParams] = None) -> BookingSearchResult:
		params = params or BookingSearchParams()
		page = max(params.page, 1)
		limit = max(params.limit, 1)
		offset = (page - 1) * limit

		query = self._filtered(params)
		try:
			total = query.count()
			bookings = (
				query.options(joinedload(Booking.package))
				.order_by(Booking.submitted_at.desc(), Booking.id.desc())
				.offset(offset)
				.limit(limit)
				.all()
			)
			stats = self._status_stats(params)
		except SQLAlchemyError:
			logger.exception("Error finding bookings")
			raise ValidationError("Failed to retrieve bookings")

		return BookingSearchResult(
			bookings=bookings,
			total=total,
			page=page,
			limit=limit,
			has_more=offset + len(bookings) < total,
			stats=stats,
		)

	def find_for_export(self, params: Optional[BookingSearchParams] = None) -> list[Booking]:
		params = params or BookingSearchParams()
		try:
			return (
				self._filtered(params)
				.options(joinedload(Booking.package))
				.order_by(Booking.submitted_at.desc(), Booking.id.desc())
				.limit(EXPORT_LIMIT)
				.all()
			)
		except SQLAlchemyError:
			logger.exception("Error finding bookings for export")
			raise ValidationError("Failed to retrieve bookings for export")

	def find_by_id(self, booking_id: int) -> Optional[Booking]:
		if not booking_id:
			raise ValidationError("Booking ID is required", field="id")

		try:
			return (
				self.db.query(Booking)
				.options(
					joinedload(Booking.package),
					selectinload(Booking.booking_accommodations).joinedload(BookingAccommodation.accommodation),
					selectinload(Booking.status_history).joinedload(BookingStatusHistory.admin),
				)
				.filter(Booking.id == booking_id)
				.first()
			)
		except SQLAlchemyError:
			logger.exception("Error finding booking by ID")
			raise ValidationError("Failed to retrieve booking")

	def find_by_booking_number(self, booking_number: str) -> Optional[Booking]:
		if not booking_number:
			raise ValidationError("Booking number is required", field="booking_number")

		try:
			return (
				self.db.query(Booking)
				.options(joinedload(Booking.package))
				.filter(Booking.booking_number == booking_number)
				.first()
			)
		except SQLAlchemyError:
			logger.exception("Error finding booking by number")
			raise ValidationError("Failed to retrieve booking")

	def find_upcoming(self, limit: int = 5, today: Optional[date] = None) -> list[Booking]:
		today = today or utcnow().date()
		try:
			return (
				self.db.query(Booking)
				.options(joinedload(Booking.package))
				.filter(
					Booking.start_date >= today,
					Booking.status.in_([BookingStatus.PENDING, BookingStatus.CONFIRMED]),
				)
				.order_by(Booking.start_date.asc(), Booking.id.asc())
				.limit(limit)
				.all()
			)
		except SQLAlchemyError:
			logger.exception("Error finding upcoming bookings")
			raise ValidationError("Failed to retrieve upcoming bookings")

	def count(self, status: Optional[BookingStatus] = None) -> int:
		try:
			query = self.db.query(Booking)
			if status:
				query = query.filter(Booking.status == status)
			return query.count()
		except SQLAlchemyError as e:
			logger.exception("Error counting bookings")
			raise DatabaseError(str(e))

	def total_revenue(self) -> Decimal:
		"""Sum of totals over bookings marked PAID."""
		try:
			total = (
				self.db.query(func.coalesce(func.sum(Booking.total_amount), 0))
				.filter(Booking.payment_status == PaymentStatus.PAID)
				.scalar()
			)
		except SQLAlchemyError as e:
			logger.exception("Error summing revenue")
			raise DatabaseError(str(e))
		return Decimal(str(total))

	def find_recent(self, limit: int = 10) -> list[Booking]:
		try:
			return (
				self.db.query(Booking)
				.options(joinedload(Booking.package))
				.order_by(Booking.created_at.desc(), Booking.id.desc())
				.limit(limit)
				.all()
			)
		except SQLAlchemyError as e:
			logger.exception("Error finding recent bookings")
			raise DatabaseError(str(e))

	def get_packages(self) -> list[dict]:
		"""Active packages for the booking list filter dropdown."""
		try:
			rows = (
				self.db.query(TourPackage.id, TourPackage.title)
				.filter(TourPackage.is_active.is_(True))
				.order_by(TourPackage.title.asc())
				.all()
			)
		except SQLAlchemyError:
			logger.exception("Error getting packages")
			raise ValidationError("Failed to retrieve packages")
		return [{"id": row.id, "title": row.title} for row in rows]

	# ===== Transitions =====
	def _load_for_update(self, booking_id: int) -> Booking:
		if not booking_id:
			raise ValidationError("Booking ID is required", field="id")
		booking = self.db.get(Booking, booking_id)
		if booking is None:
			raise NotFoundError("Booking not found", code="BOOKING_NOT_FOUND")
		return booking

	def update_status(
		self,
		booking_id: int,
		new_status: BookingStatus | str,
		notes: Optional[str],
		admin_user_id: int,
	) -> Booking:
		"""Move a booking to ``new_status`` and append one history row.

		Any status may follow any other. Entering CONFIRMED stamps ``confirmed_at``;
		leaving it does not clear the stamp. The history row and the booking update
		are committed together.
		"""
		new_status = _coerce(BookingStatus, new_status, "status")
		try:
			booking = self._load_for_update(booking_id)
			now = utcnow()
			self.db.add(BookingStatusHistory(
				booking_id=booking.id,
				previous_status=booking.status,
				new_status=new_status,
				notes=notes or None,
				changed_by=admin_user_id,
				created_at=now,
			))
			booking.status = new_status
			if new_status == BookingStatus.CONFIRMED:
				booking.confirmed_at = now
			self.db.commit()
			self.db.refresh(booking)
			return booking
		except ValidationError:
			raise
		except SQLAlchemyError:
			self.db.rollback()
			logger.exception("Error updating booking status for booking %s", booking_id)
			raise ValidationError("Failed to update booking status")

	def update_payment_status(
		self,
		booking_id: int,
		new_payment_status: PaymentStatus | str,
		notes: Optional[str],
		admin_user_id: int,
	) -> Booking:
		new_payment_status = _coerce(PaymentStatus, new_payment_status, "payment_status")
		try:
			booking = self._load_for_update(booking_id)
			self.db.add(BookingStatusHistory(
				booking_id=booking.id,
				previous_payment=booking.payment_status,
				new_payment=new_payment_status,
				notes=notes or None,
				changed_by=admin_user_id,
				created_at=utcnow(),
			))
			booking.payment_status = new_payment_status
			self.db.commit()
			self.db.refresh(booking)
			return booking
		except ValidationError:
			raise
		except SQLAlchemyError:
			self.db.rollback()
			logger.exception("Error updating payment status for booking %s", booking_id)
			raise ValidationError("Failed to update payment status")

	def delete(self, booking_id: int) -> None:
		"""Hard delete; status history and accommodation links go with it."""
		try:
			booking = self._load_for_update(booking_id)
			booking_number = booking.booking_number
			self.db.delete(booking)
			self.db.commit()
			logger.info("Booking %s deleted", booking_number)
		except ValidationError:
			raise
		except SQLAlchemyError:
			self.db.rollback()
			logger.exception("Error deleting booking %s", booking_id)
			raise ValidationError("Failed to delete booking")
