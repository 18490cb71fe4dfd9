"""Which email, if any, a booking change sends.

Every helper here catches and logs its own failures; a booking that was
created or updated stays created or updated whatever the mail server does.
"""
import logging
from typing import Optional

from cycleparadise.db.models import Booking, BookingStatus, PaymentStatus
from cycleparadise.services.email_service import (
	EmailService, BookingEmailDetails, cancellation_template, payment_confirmed_template,
)

logger = logging.getLogger(__name__)


def format_long_date(value) -> str:
	"""``2025-06-01`` -> ``June 1, 2025``."""
	return f"{value.strftime('%B')} {value.day}, {value.year}"


def booking_email_details(booking: Booking, package_title: Optional[str] = None) -> BookingEmailDetails:
	return BookingEmailDetails(
		booking_number=booking.booking_number,
		customer_name=booking.customer_name,
		package_title=package_title or booking.package.title,
		start_date=format_long_date(booking.start_date),
		number_of_participants=booking.number_of_participants,
		total_amount=float(booking.total_amount),
	)


def send_booking_received(email_service: EmailService, booking: Booking, package_title: Optional[str] = None) -> bool:
	try:
		return email_service.send_booking_confirmation(booking.customer_email, booking_email_details(booking, package_title))
	except Exception:
		logger.exception("Failed to send confirmation email for booking %s", booking.booking_number)
		return False


def send_cancellation(email_service: EmailService, booking: Booking, notes: Optional[str] = None) -> bool:
	try:
		template = cancellation_template(
			booking.booking_number,
			booking.customer_name,
			booking.package.title,
			email_service.contact_email,
			notes,
		)
		return email_service.send_email(booking.customer_email, template)
	except Exception:
		logger.exception("Failed to send cancellation email for booking %s", booking.booking_number)
		return False


def notify_status_change(
	email_service: EmailService,
	booking: Booking,
	previous_status: BookingStatus,
	notes: Optional[str] = None,
) -> bool:
	"""Email the customer about a status change. Returns True if an email went out."""
	if previous_status == booking.status:
		return False
	if booking.status == BookingStatus.CONFIRMED:
		return send_booking_received(email_service, booking)
	if booking.status == BookingStatus.CANCELLED:
		return send_cancellation(email_service, booking, notes)
	return False


def notify_payment_change(email_service: EmailService, booking: Booking, previous_payment: PaymentStatus) -> bool:
	"""Only a move into PAID from another payment state is announced."""
	if booking.payment_status != PaymentStatus.PAID or previous_payment == PaymentStatus.PAID:
		return False
	try:
		template = payment_confirmed_template(booking.booking_number, booking.customer_name, float(booking.total_amount))
		return email_service.send_email(booking.customer_email, template)
	except Exception:
		logger.exception("Failed to send payment email for booking %s", booking.booking_number)
		return False
