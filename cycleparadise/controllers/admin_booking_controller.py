import logging
from datetime import date
from typing import Optional, List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse

from cycleparadise.core.dependencies import get_booking_repository, get_email_service
from cycleparadise.core.errors import ValidationError, NotFoundError
from cycleparadise.db.models import AdminUser, utcnow
from cycleparadise.repositories.bookings import BookingRepository, BookingSearchParams
from cycleparadise.schemas import (
	BookingListResponse, BookingResponse, BookingDetail, BookingStats, BookingMutationResponse,
	StatusUpdateRequest, PaymentUpdateRequest, BookingEmailRequest, PackageOption, SuccessResponse,
)
from cycleparadise.services.auth_service import AuthService
from cycleparadise.services.booking_notifications import (
	notify_status_change, notify_payment_change, send_booking_received, send_cancellation,
)
from cycleparadise.services.email_service import EmailService, custom_message_template
from cycleparadise.services.export import iter_bookings_csv

logger = logging.getLogger(__name__)

router = APIRouter(
	prefix="/api/admin/bookings",
	tags=["admin-bookings"],
	dependencies=[Depends(AuthService.get_current_admin)],
)


def search_params(
	q: Optional[str] = None,
	status: Optional[str] = None,
	payment_status: Optional[str] = Query(None, alias="paymentStatus"),
	package_id: Optional[int] = Query(None, alias="packageId"),
	start_date: Optional[date] = Query(None, alias="startDate"),
	end_date: Optional[date] = Query(None, alias="endDate"),
	page: int = Query(1, ge=1),
	limit: int = Query(10, ge=1, le=100),
) -> BookingSearchParams:
	return BookingSearchParams(
		query=q or None,
		status=status or None,
		payment_status=payment_status or None,
		package_id=package_id,
		start_date=start_date,
		end_date=end_date,
		page=page,
		limit=limit,
	)


@router.get("", response_model=BookingListResponse)
def list_bookings(
	params: BookingSearchParams = Depends(search_params),
	bookings: BookingRepository = Depends(get_booking_repository),
):
	result = bookings.find_many(params)
	return BookingListResponse(
		bookings=[BookingResponse.model_validate(b) for b in result.bookings],
		total=result.total,
		page=result.page,
		limit=result.limit,
		has_more=result.has_more,
		stats=BookingStats.model_validate(result.stats),
	)


@router.get("/packages", response_model=List[PackageOption])
def list_package_options(bookings: BookingRepository = Depends(get_booking_repository)):
	"""Options for the package filter dropdown."""
	return [PackageOption(**p) for p in bookings.get_packages()]


@router.get("/export")
def export_bookings(
	params: BookingSearchParams = Depends(search_params),
	bookings: BookingRepository = Depends(get_booking_repository),
):
	rows = bookings.find_for_export(params)
	filename = f"bookings-export-{utcnow().date().isoformat()}.csv"
	return StreamingResponse(
		iter_bookings_csv(rows),
		media_type="text/csv; charset=utf-8",
		headers={
			"Content-Disposition": f'attachment; filename="{filename}"',
			"Cache-Control": "no-cache",
		},
	)


@router.get("/{booking_id}", response_model=BookingDetail)
def get_booking(booking_id: int, bookings: BookingRepository = Depends(get_booking_repository)):
	booking = bookings.find_by_id(booking_id)
	if booking is None:
		raise NotFoundError("Booking not found", code="BOOKING_NOT_FOUND")
	return BookingDetail.model_validate(booking)


@router.delete("/{booking_id}", response_model=SuccessResponse)
def delete_booking(booking_id: int, bookings: BookingRepository = Depends(get_booking_repository)):
	bookings.delete(booking_id)
	return SuccessResponse(message="Booking deleted successfully")


@router.post("/{booking_id}/status", response_model=BookingMutationResponse)
def update_booking_status(
	booking_id: int,
	payload: StatusUpdateRequest,
	admin: AdminUser = Depends(AuthService.get_current_admin),
	bookings: BookingRepository = Depends(get_booking_repository),
	email_service: EmailService = Depends(get_email_service),
):
	current = bookings.find_by_id(booking_id)
	if current is None:
		raise NotFoundError("Booking not found", code="BOOKING_NOT_FOUND")
	previous_status = current.status

	updated = bookings.update_status(booking_id, payload.status, payload.notes, admin.id)
	notify_status_change(email_service, updated, previous_status, payload.notes)

	return BookingMutationResponse(
		data=BookingResponse.model_validate(updated),
		message="Status updated successfully",
	)


@router.post("/{booking_id}/payment", response_model=BookingMutationResponse)
def update_payment_status(
	booking_id: int,
	payload: PaymentUpdateRequest,
	admin: AdminUser = Depends(AuthService.get_current_admin),
	bookings: BookingRepository = Depends(get_booking_repository),
	email_service: EmailService = Depends(get_email_service),
):
	current = bookings.find_by_id(booking_id)
	if current is None:
		raise NotFoundError("Booking not found", code="BOOKING_NOT_FOUND")
	previous_payment = current.payment_status

	updated = bookings.update_payment_status(booking_id, payload.payment_status, payload.notes, admin.id)
	notify_payment_change(email_service, updated, previous_payment)

	return BookingMutationResponse(
		data=BookingResponse.model_validate(updated),
		message="Payment status updated successfully",
	)


@router.post("/{booking_id}/email")
def send_booking_email(
	booking_id: int,
	payload: BookingEmailRequest,
	bookings: BookingRepository = Depends(get_booking_repository),
	email_service: EmailService = Depends(get_email_service),
):
	"""Send one of the canned emails, or a custom message, to the booking's customer."""
	booking = bookings.find_by_id(booking_id)
	if booking is None:
		raise NotFoundError("Booking not found", code="BOOKING_NOT_FOUND")

	if payload.template == "confirmation":
		sent = send_booking_received(email_service, booking)
	elif payload.template == "cancellation":
		sent = send_cancellation(email_service, booking)
	else:
		if not payload.subject or not payload.message:
			raise ValidationError("Subject and message are required for custom emails", field="message")
		template = custom_message_template(
			payload.subject,
			payload.message,
			booking.booking_number,
			booking.customer_name,
			booking.package.title,
		)
		sent = email_service.send_email(booking.customer_email, template)

	if not sent:
		return JSONResponse(
			status_code=500,
			content={"success": False, "error": "Failed to send email. Please check email configuration."},
		)
	return SuccessResponse(message="Email sent successfully")
