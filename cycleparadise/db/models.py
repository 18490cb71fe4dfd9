import enum
from datetime import datetime, timezone, date
from decimal import Decimal

from sqlalchemy import BigInteger, Integer, String, Date, DateTime, ForeignKey, Enum, DECIMAL, Text, Boolean, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column

from cycleparadise.db.session import Base

# SQLite only autoincrements INTEGER primary keys
BigId = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
	"""Naive UTC timestamp; every DateTime column stores UTC without tzinfo."""
	return datetime.now(timezone.utc).replace(tzinfo=None)


class BookingStatus(str, enum.Enum):
	PENDING = "PENDING"
	CONFIRMED = "CONFIRMED"
	CANCELLED = "CANCELLED"
	COMPLETED = "COMPLETED"


class PaymentStatus(str, enum.Enum):
	PENDING = "PENDING"
	PAID = "PAID"
	PARTIAL = "PARTIAL"
	REFUNDED = "REFUNDED"


class PaymentMethod(str, enum.Enum):
	CASH = "CASH"
	BANK_TRANSFER = "BANK_TRANSFER"
	CARD = "CARD"
	OTHER = "OTHER"


class DifficultyLevel(str, enum.Enum):
	EASY = "EASY"
	MODERATE = "MODERATE"
	CHALLENGING = "CHALLENGING"
	EXPERT = "EXPERT"


class AdminRole(str, enum.Enum):
	ADMIN = "ADMIN"
	SUPER_ADMIN = "SUPER_ADMIN"


class AccommodationType(str, enum.Enum):
	HOTEL = "HOTEL"
	GUESTHOUSE = "GUESTHOUSE"
	RESORT = "RESORT"
	HOMESTAY = "HOMESTAY"
	CAMPING = "CAMPING"


class TourPackage(Base):
	__tablename__ = "tour_packages"

	id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
	title: Mapped[str] = mapped_column(String(255), nullable=False)
	slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
	description: Mapped[str | None] = mapped_column(Text, nullable=True)
	short_description: Mapped[str | None] = mapped_column(String(500), nullable=True)
	duration: Mapped[int] = mapped_column(Integer, nullable=False)
	difficulty_level: Mapped[DifficultyLevel] = mapped_column(Enum(DifficultyLevel), nullable=False, default=DifficultyLevel.MODERATE)
	region: Mapped[str] = mapped_column(String(255), nullable=False)
	base_price: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), nullable=False)
	max_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=12)
	highlights: Mapped[list | None] = mapped_column(JSON, nullable=True)
	images: Mapped[list | None] = mapped_column(JSON, nullable=True)
	is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
	featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
	created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
	updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

	bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="package")


class CyclingGuide(Base):
	__tablename__ = "cycling_guides"

	id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
	title: Mapped[str] = mapped_column(String(255), nullable=False)
	slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
	region: Mapped[str] = mapped_column(String(255), nullable=False)
	content: Mapped[str] = mapped_column(Text, nullable=False)
	short_description: Mapped[str | None] = mapped_column(String(500), nullable=True)
	difficulty_rating: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
	estimated_distance: Mapped[float | None] = mapped_column(DECIMAL(8, 2), nullable=True)
	estimated_duration: Mapped[str | None] = mapped_column(String(100), nullable=True)
	is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
	featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
	created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
	updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class AdminUser(Base):
	__tablename__ = "admin_users"

	id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
	email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
	password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
	first_name: Mapped[str] = mapped_column(String(100), nullable=False)
	last_name: Mapped[str] = mapped_column(String(100), nullable=False)
	role: Mapped[AdminRole] = mapped_column(Enum(AdminRole), nullable=False, default=AdminRole.ADMIN)
	is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
	last_login_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
	created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
	updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

	sessions: Mapped[list["AdminSession"]] = relationship("AdminSession", back_populates="admin", cascade="all, delete-orphan")


class AdminSession(Base):
	__tablename__ = "sessions"

	id: Mapped[str] = mapped_column(String(64), primary_key=True)
	admin_user_id: Mapped[int] = mapped_column(BigId, ForeignKey("admin_users.id", ondelete="CASCADE"), nullable=False)
	data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
	expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
	created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

	admin: Mapped[AdminUser] = relationship("AdminUser", back_populates="sessions")


class Accommodation(Base):
	__tablename__ = "accommodations"

	id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
	name: Mapped[str] = mapped_column(String(255), nullable=False)
	slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
	type: Mapped[AccommodationType] = mapped_column(Enum(AccommodationType), nullable=False)
	location: Mapped[str] = mapped_column(String(255), nullable=False)
	description: Mapped[str | None] = mapped_column(Text, nullable=True)
	price_per_night: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), nullable=False)
	max_occupancy: Mapped[int] = mapped_column(Integer, nullable=False)
	is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
	created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class Booking(Base):
	__tablename__ = "bookings"

	id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
	booking_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
	package_id: Mapped[int] = mapped_column(BigId, ForeignKey("tour_packages.id"), nullable=False, index=True)
	customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
	customer_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
	customer_phone: Mapped[str] = mapped_column(String(50), nullable=False)
	customer_country: Mapped[str | None] = mapped_column(String(100), nullable=True)
	number_of_participants: Mapped[int] = mapped_column(Integer, nullable=False)
	start_date: Mapped[date] = mapped_column(Date, nullable=False)
	end_date: Mapped[date] = mapped_column(Date, nullable=False)
	special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)
	total_amount: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), nullable=False)
	status: Mapped[BookingStatus] = mapped_column(Enum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
	confirmation_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
	payment_status: Mapped[PaymentStatus] = mapped_column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
	payment_method: Mapped[PaymentMethod] = mapped_column(Enum(PaymentMethod), nullable=False, default=PaymentMethod.CASH)
	submitted_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
	confirmed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
	created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
	updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

	package: Mapped[TourPackage] = relationship("TourPackage", back_populates="bookings")
	booking_accommodations: Mapped[list["BookingAccommodation"]] = relationship(
		"BookingAccommodation", back_populates="booking", cascade="all, delete-orphan"
	)
	status_history: Mapped[list["BookingStatusHistory"]] = relationship(
		"BookingStatusHistory",
		back_populates="booking",
		cascade="all, delete-orphan",
		order_by=lambda: (BookingStatusHistory.created_at.desc(), BookingStatusHistory.id.desc()),
	)


class BookingAccommodation(Base):
	__tablename__ = "booking_accommodations"

	id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
	booking_id: Mapped[int] = mapped_column(BigId, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
	accommodation_id: Mapped[int] = mapped_column(BigId, ForeignKey("accommodations.id"), nullable=False)
	check_in_date: Mapped[date] = mapped_column(Date, nullable=False)
	check_out_date: Mapped[date] = mapped_column(Date, nullable=False)
	room_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

	booking: Mapped[Booking] = relationship("Booking", back_populates="booking_accommodations")
	accommodation: Mapped[Accommodation] = relationship("Accommodation")


class BookingStatusHistory(Base):
	__tablename__ = "booking_status_history"

	id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
	booking_id: Mapped[int] = mapped_column(BigId, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
	# a row records either a status change or a payment change, never both
	previous_status: Mapped[BookingStatus | None] = mapped_column(Enum(BookingStatus), nullable=True)
	new_status: Mapped[BookingStatus | None] = mapped_column(Enum(BookingStatus), nullable=True)
	previous_payment: Mapped[PaymentStatus | None] = mapped_column(Enum(PaymentStatus), nullable=True)
	new_payment: Mapped[PaymentStatus | None] = mapped_column(Enum(PaymentStatus), nullable=True)
	notes: Mapped[str | None] = mapped_column(Text, nullable=True)
	changed_by: Mapped[int] = mapped_column(BigId, ForeignKey("admin_users.id"), nullable=False)
	created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

	booking: Mapped[Booking] = relationship("Booking", back_populates="status_history")
	admin: Mapped[AdminUser] = relationship("AdminUser")


class MediaAsset(Base):
	__tablename__ = "media_assets"

	id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
	filename: Mapped[str] = mapped_column(String(255), nullable=False)
	url: Mapped[str] = mapped_column(String(1024), nullable=False)
	mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
	size: Mapped[int] = mapped_column(Integer, nullable=False)
	alt_text: Mapped[str | None] = mapped_column(String(255), nullable=True)
	uploaded_by: Mapped[int | None] = mapped_column(BigId, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)
	created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
