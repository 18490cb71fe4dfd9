from datetime import date, datetime
from decimal import Decimal

import pytest

from cycleparadise.db.models import Booking, BookingStatus, PaymentStatus, PaymentMethod, TourPackage
from cycleparadise.services.export import (
	CSV_HEADERS, escape_csv, us_date, us_datetime, booking_row, iter_bookings_csv,
)


def _booking(**overrides):
	fields = dict(
		booking_number="CP-20250601-0001",
		customer_name="Jane Doe",
		customer_email="jane@example.com",
		customer_phone="+94 77 123 4567",
		customer_country="Sri Lanka",
		number_of_participants=2,
		start_date=date(2025, 6, 1),
		end_date=date(2025, 6, 5),
		total_amount=Decimal("1500"),
		status=BookingStatus.CONFIRMED,
		payment_status=PaymentStatus.PARTIAL,
		payment_method=PaymentMethod.BANK_TRANSFER,
		submitted_at=datetime(2025, 5, 20, 14, 5, 9),
		confirmed_at=None,
		special_requests=None,
	)
	fields.update(overrides)
	booking = Booking(**fields)
	booking.package = TourPackage(title="Hill Country Explorer", slug="hill-country-explorer")
	return booking


@pytest.mark.parametrize("value, expected", [
	("Smith, John", '"Smith, John"'),
	('He said "hi"', '"He said ""hi"""'),
	("line one\nline two", '"line one\nline two"'),
	("line one\rline two", '"line one\rline two"'),
	("plain", "plain"),
	("", ""),
	(None, ""),
	(3, "3"),
	(BookingStatus.PENDING, "PENDING"),
])
def test_escape_csv(value, expected):
	assert escape_csv(value) == expected


def test_us_dates():
	assert us_date(date(2025, 6, 1)) == "6/1/2025"
	assert us_datetime(datetime(2025, 6, 1, 0, 7, 3)) == "6/1/2025, 12:07:03 AM"
	assert us_datetime(datetime(2025, 12, 31, 15, 30, 0)) == "12/31/2025, 3:30:00 PM"
	assert us_datetime(None) == ""


def test_booking_row_columns():
	row = booking_row(_booking())

	assert len(row) == len(CSV_HEADERS)
	assert row[0] == "CP-20250601-0001"
	assert row[5] == "Hill Country Explorer"
	assert row[6:10] == ["6/1/2025", "6/5/2025", "4", "2"]
	assert row[10] == "1500.00"
	assert row[11:14] == ["CONFIRMED", "PARTIAL", "BANK_TRANSFER"]
	assert row[14] == '"5/20/2025, 2:05:09 PM"'
	assert row[15] == ""
	assert row[16] == ""


def test_csv_document_quotes_only_what_needs_it():
	document = "".join(iter_bookings_csv([
		_booking(customer_name="Doe, Jane", special_requests='Vegetarian "strict"'),
	]))

	header, line = document.split("\n", 1)
	assert header == ",".join(CSV_HEADERS)
	assert line.startswith('CP-20250601-0001,"Doe, Jane",jane@example.com,')
	assert line.endswith(',"Vegetarian ""strict"""')
	assert not document.endswith("\n")


def test_empty_export_is_header_only():
	assert "".join(iter_bookings_csv([])) == ",".join(CSV_HEADERS)


def test_amount_always_has_two_decimals():
	row = booking_row(_booking(total_amount=Decimal("1234.5")))

	assert row[10] == "1234.50"
