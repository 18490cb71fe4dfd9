from fastapi import APIRouter, Depends

from cycleparadise.core.dependencies import get_booking_repository, get_package_repository
from cycleparadise.db.models import BookingStatus
from cycleparadise.repositories.bookings import BookingRepository
from cycleparadise.repositories.catalog import TourPackageRepository
from cycleparadise.schemas import DashboardStats, RecentBooking, BookingResponse
from cycleparadise.services.auth_service import AuthService

router = APIRouter(
	prefix="/api/admin/dashboard",
	tags=["admin-dashboard"],
	dependencies=[Depends(AuthService.get_current_admin)],
)


def _split_name(full_name: str) -> tuple[str, str]:
	parts = full_name.split()
	first = parts[0] if parts else ""
	last = " ".join(parts[1:]) or first
	return first, last


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
	bookings: BookingRepository = Depends(get_booking_repository),
	packages: TourPackageRepository = Depends(get_package_repository),
):
	recent = []
	for booking in bookings.find_recent(limit=10):
		first, last = _split_name(booking.customer_name)
		recent.append(RecentBooking(
			id=booking.id,
			booking_number=booking.booking_number,
			customer_first_name=first,
			customer_last_name=last,
			customer_email=booking.customer_email,
			package_name=booking.package.title,
			tour_start_date=booking.start_date,
			total_amount=float(booking.total_amount),
			status=booking.status,
		))

	return DashboardStats(
		total_bookings=bookings.count(),
		pending_bookings=bookings.count(BookingStatus.PENDING),
		active_packages=packages.count_active(),
		total_revenue=float(bookings.total_revenue()),
		recent_bookings=recent,
		upcoming_bookings=[BookingResponse.model_validate(b) for b in bookings.find_upcoming(limit=5)],
	)
