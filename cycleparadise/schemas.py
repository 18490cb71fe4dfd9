from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal
from datetime import datetime, date

from cycleparadise.db.models import (
	BookingStatus, PaymentStatus, PaymentMethod, DifficultyLevel, AdminRole, AccommodationType,
)


class CamelModel(BaseModel):
	"""Snake_case in Python, camelCase on the wire."""

	class Config:
		from_attributes = True
		populate_by_name = True
		alias_generator = to_camel


# ===== ADMIN USER SCHEMAS =====
class AdminUserSummary(CamelModel):
	first_name: str
	last_name: str
	email: str


class AdminUserResponse(AdminUserSummary):
	id: int
	role: AdminRole
	last_login_at: Optional[datetime] = None


# ===== PACKAGE / GUIDE SCHEMAS =====
class PackageOption(CamelModel):
	id: int
	title: str


class PackageSummary(PackageOption):
	slug: str
	region: str
	duration: int
	difficulty_level: DifficultyLevel
	base_price: float
	short_description: Optional[str] = None
	featured: bool = False


class PackageResponse(PackageSummary):
	description: Optional[str] = None
	max_participants: int
	highlights: Optional[List[str]] = None
	images: Optional[List[str]] = None


class GuideSummary(CamelModel):
	id: int
	title: str
	slug: str
	region: str
	short_description: Optional[str] = None
	difficulty_rating: int
	estimated_distance: Optional[float] = None
	estimated_duration: Optional[str] = None
	featured: bool = False


class GuideResponse(GuideSummary):
	content: str


# ===== BOOKING SCHEMAS =====
class BookingCreateRequest(CamelModel):
	package_slug: str = Field(..., min_length=1)
	customer_first_name: str = Field(..., min_length=1)
	customer_last_name: str = Field(..., min_length=1)
	customer_email: EmailStr
	customer_phone: str = Field(..., min_length=1)
	customer_country: Optional[str] = None
	number_of_guests: int = Field(..., ge=1)
	start_date: date
	end_date: date
	special_requests: Optional[str] = None
	total_price: float = Field(..., gt=0)


class BookingCreatedData(CamelModel):
	booking_number: str
	id: int
	status: BookingStatus


class BookingCreatedResponse(CamelModel):
	success: bool = True
	data: BookingCreatedData


class BookingResponse(CamelModel):
	id: int
	booking_number: str
	package_id: int
	customer_name: str
	customer_email: str
	customer_phone: str
	customer_country: Optional[str] = None
	number_of_participants: int
	start_date: date
	end_date: date
	special_requests: Optional[str] = None
	total_amount: float
	status: BookingStatus
	payment_status: PaymentStatus
	payment_method: PaymentMethod
	confirmation_notes: Optional[str] = None
	submitted_at: datetime
	confirmed_at: Optional[datetime] = None
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	package: Optional[PackageSummary] = None


class AccommodationResponse(CamelModel):
	id: int
	name: str
	type: AccommodationType
	location: str


class BookingAccommodationResponse(CamelModel):
	id: int
	check_in_date: date
	check_out_date: date
	room_count: int
	accommodation: AccommodationResponse


class StatusHistoryResponse(CamelModel):
	id: int
	previous_status: Optional[BookingStatus] = None
	new_status: Optional[BookingStatus] = None
	previous_payment: Optional[PaymentStatus] = None
	new_payment: Optional[PaymentStatus] = None
	notes: Optional[str] = None
	changed_by: int
	created_at: datetime
	admin: Optional[AdminUserSummary] = None


class BookingDetail(BookingResponse):
	booking_accommodations: List[BookingAccommodationResponse] = []
	status_history: List[StatusHistoryResponse] = []


class StatusUpdateRequest(CamelModel):
	# validated against BookingStatus by the repository so bad values get a 400
	status: str
	notes: Optional[str] = None


class PaymentUpdateRequest(CamelModel):
	payment_status: str
	notes: Optional[str] = None


class BookingMutationResponse(CamelModel):
	data: BookingResponse
	message: str


class BookingEmailRequest(CamelModel):
	template: Literal["confirmation", "cancellation", "custom"]
	subject: Optional[str] = None
	message: Optional[str] = None


# ===== AUTH SCHEMAS =====
class LoginRequest(CamelModel):
	email: EmailStr
	password: str
	remember: bool = False


class TokenResponse(CamelModel):
	access_token: str
	token_type: str = "bearer"
	expires_at: datetime
	user: AdminUserResponse


# ===== RESPONSE WRAPPERS =====
class SuccessResponse(CamelModel):
	success: bool = True
	message: str
	data: Optional[dict] = None


# ===== LIST RESPONSES =====
class PackageListResponse(CamelModel):
	packages: List[PackageSummary]
	total: int
	page: int
	per_page: int


class GuideListResponse(CamelModel):
	guides: List[GuideSummary]
	total: int
	page: int
	per_page: int


class BookingStats(CamelModel):
	pending: int = 0
	confirmed: int = 0
	cancelled: int = 0
	completed: int = 0


class BookingListResponse(CamelModel):
	bookings: List[BookingResponse]
	total: int
	page: int
	limit: int
	has_more: bool
	stats: BookingStats


# ===== DASHBOARD SCHEMAS =====
class RecentBooking(CamelModel):
	id: int
	booking_number: str
	customer_first_name: str
	customer_last_name: str
	customer_email: str
	package_name: str
	tour_start_date: date
	total_amount: float
	status: BookingStatus


class DashboardStats(CamelModel):
	total_bookings: int
	pending_bookings: int
	active_packages: int
	total_revenue: float
	recent_bookings: List[RecentBooking]
	upcoming_bookings: List[BookingResponse]
