from datetime import date

from cycleparadise.db.models import BookingStatus, PaymentStatus
from cycleparadise.services.booking_notifications import (
	format_long_date, booking_email_details, notify_status_change, notify_payment_change,
)

from conftest import RecordingEmailService


def test_format_long_date():
	assert format_long_date(date(2025, 6, 1)) == "June 1, 2025"
	assert format_long_date(date(2025, 12, 25)) == "December 25, 2025"


def test_email_details_from_booking(make_booking):
	booking = make_booking(total_amount=1250.5)

	details = booking_email_details(booking)

	assert details.booking_number == booking.booking_number
	assert details.package_title == "Hill Country Explorer"
	assert details.start_date == "June 1, 2025"
	assert details.total_amount == 1250.5


def test_confirming_sends_confirmation(make_booking, repository, admin_user, email_service):
	booking = make_booking()
	repository.update_status(booking.id, BookingStatus.CONFIRMED, None, admin_user.id)

	assert notify_status_change(email_service, booking, BookingStatus.PENDING) is True
	assert email_service.subjects == [f"Booking Confirmation - {booking.booking_number}"]
	assert email_service.sent[0][0] == "jane@example.com"


def test_cancelling_sends_cancellation_with_notes(make_booking, repository, admin_user, email_service):
	booking = make_booking()
	repository.update_status(booking.id, BookingStatus.CANCELLED, "Trail closed <landslide>", admin_user.id)

	notify_status_change(email_service, booking, BookingStatus.PENDING, "Trail closed <landslide>")

	assert email_service.subjects == [f"Booking Cancellation - {booking.booking_number}"]
	assert "Trail closed &lt;landslide&gt;" in email_service.sent[0][1].html


def test_unchanged_or_other_statuses_send_nothing(make_booking, repository, admin_user, email_service):
	booking = make_booking()
	assert notify_status_change(email_service, booking, BookingStatus.PENDING) is False

	repository.update_status(booking.id, BookingStatus.COMPLETED, None, admin_user.id)
	assert notify_status_change(email_service, booking, BookingStatus.PENDING) is False

	repository.update_status(booking.id, BookingStatus.CONFIRMED, None, admin_user.id)
	assert notify_status_change(email_service, booking, BookingStatus.CONFIRMED) is False
	assert email_service.sent == []


def test_payment_email_only_when_becoming_paid(make_booking, repository, admin_user, email_service):
	booking = make_booking()
	repository.update_payment_status(booking.id, PaymentStatus.PARTIAL, None, admin_user.id)
	assert notify_payment_change(email_service, booking, PaymentStatus.PENDING) is False

	repository.update_payment_status(booking.id, PaymentStatus.PAID, None, admin_user.id)
	assert notify_payment_change(email_service, booking, PaymentStatus.PARTIAL) is True

	repository.update_payment_status(booking.id, PaymentStatus.PAID, None, admin_user.id)
	assert notify_payment_change(email_service, booking, PaymentStatus.PAID) is False

	assert email_service.subjects == [f"Payment Confirmed - {booking.booking_number}"]
	assert "USD 500.00" in email_service.sent[0][1].html


def test_failed_delivery_is_reported_not_raised(make_booking, repository, admin_user):
	failing = RecordingEmailService(fail=True)
	booking = make_booking()
	repository.update_status(booking.id, BookingStatus.CONFIRMED, None, admin_user.id)

	assert notify_status_change(failing, booking, BookingStatus.PENDING) is False
	assert len(failing.sent) == 1


def test_unexpected_errors_are_swallowed(make_booking, repository, admin_user):
	class ExplodingEmailService(RecordingEmailService):
		def send_email(self, to, template, cc=None, bcc=None):
			raise RuntimeError("mail queue full")

	booking = make_booking()
	repository.update_payment_status(booking.id, PaymentStatus.PAID, None, admin_user.id)

	assert notify_payment_change(ExplodingEmailService(), booking, PaymentStatus.PENDING) is False
