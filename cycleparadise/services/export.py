from datetime import date, datetime
from typing import Any, Iterable, Iterator

from cycleparadise.db.models import Booking

CSV_HEADERS = [
	"Booking Number",
	"Customer Name",
	"Customer Email",
	"Customer Phone",
	"Customer Country",
	"Package Title",
	"Start Date",
	"End Date",
	"Duration (days)",
	"Participants",
	"Total Amount (USD)",
	"Booking Status",
	"Payment Status",
	"Payment Method",
	"Submitted Date",
	"Confirmed Date",
	"Special Requests",
]


def escape_csv(value: Any) -> str:
	"""Quote a field holding a comma, quote or line break; inner quotes are doubled."""
	if value is None:
		return ""
	text = value.value if hasattr(value, "value") else str(value)
	if "," in text or "\n" in text or "\r" in text or '"' in text:
		return '"' + text.replace('"', '""') + '"'
	return text


def us_date(value: date | None) -> str:
	if value is None:
		return ""
	return f"{value.month}/{value.day}/{value.year}"


def us_datetime(value: datetime | None) -> str:
	if value is None:
		return ""
	hour = value.hour % 12 or 12
	meridiem = "AM" if value.hour < 12 else "PM"
	return f"{us_date(value)}, {hour}:{value.minute:02d}:{value.second:02d} {meridiem}"


def booking_row(booking: Booking) -> list[str]:
	duration = (booking.end_date - booking.start_date).days
	return [
		escape_csv(booking.booking_number),
		escape_csv(booking.customer_name),
		escape_csv(booking.customer_email),
		escape_csv(booking.customer_phone),
		escape_csv(booking.customer_country or ""),
		escape_csv(booking.package.title if booking.package else ""),
		escape_csv(us_date(booking.start_date)),
		escape_csv(us_date(booking.end_date)),
		escape_csv(duration),
		escape_csv(booking.number_of_participants),
		escape_csv(f"{float(booking.total_amount):.2f}"),
		escape_csv(booking.status),
		escape_csv(booking.payment_status),
		escape_csv(booking.payment_method),
		escape_csv(us_datetime(booking.submitted_at)),
		escape_csv(us_datetime(booking.confirmed_at)),
		escape_csv(booking.special_requests or ""),
	]


def iter_bookings_csv(bookings: Iterable[Booking]) -> Iterator[str]:
	"""Yield the export one line at a time, header first."""
	yield ",".join(CSV_HEADERS)
	for booking in bookings:
		yield "\n" + ",".join(booking_row(booking))