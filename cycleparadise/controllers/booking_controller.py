from fastapi import APIRouter, Depends, BackgroundTasks

from cycleparadise.core.dependencies import get_booking_repository, get_package_repository, get_email_service
from cycleparadise.core.errors import ValidationError, NotFoundError
from cycleparadise.repositories.bookings import BookingRepository, BookingCreateData
from cycleparadise.repositories.catalog import TourPackageRepository
from cycleparadise.schemas import BookingCreateRequest, BookingCreatedResponse, BookingCreatedData
from cycleparadise.services.booking_notifications import booking_email_details
from cycleparadise.services.email_service import EmailService

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=BookingCreatedResponse, status_code=201)
def create_booking(
	payload: BookingCreateRequest,
	background_tasks: BackgroundTasks,
	bookings: BookingRepository = Depends(get_booking_repository),
	packages: TourPackageRepository = Depends(get_package_repository),
	email_service: EmailService = Depends(get_email_service),
):
	"""Public booking form submission."""
	if payload.end_date < payload.start_date:
		raise ValidationError("End date must be on or after start date", field="endDate")

	tour_package = packages.find_by_slug(payload.package_slug)
	if tour_package is None:
		raise NotFoundError("Package not found", code="PACKAGE_NOT_FOUND")

	booking = bookings.create(BookingCreateData(
		package_id=tour_package.id,
		customer_name=f"{payload.customer_first_name.strip()} {payload.customer_last_name.strip()}",
		customer_email=str(payload.customer_email),
		customer_phone=payload.customer_phone,
		customer_country=payload.customer_country,
		number_of_participants=payload.number_of_guests,
		start_date=payload.start_date,
		end_date=payload.end_date,
		special_requests=payload.special_requests,
		total_amount=payload.total_price,
	))

	# sent after the response; a mail failure never undoes the booking
	background_tasks.add_task(
		email_service.send_booking_confirmation,
		booking.customer_email,
		booking_email_details(booking, tour_package.title),
	)

	return BookingCreatedResponse(data=BookingCreatedData(
		booking_number=booking.booking_number,
		id=booking.id,
		status=booking.status,
	))
