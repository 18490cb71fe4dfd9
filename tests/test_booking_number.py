from datetime import datetime, timezone, timedelta, date
from decimal import Decimal

from cycleparadise.db.models import Booking
from cycleparadise.services.booking_number import booking_number_prefix, generate_booking_number


def _insert(db_session, package_id, number):
	db_session.add(Booking(
		booking_number=number,
		package_id=package_id,
		customer_name="Test",
		customer_email="t@example.com",
		customer_phone="123456789",
		number_of_participants=1,
		start_date=date(2025, 6, 1),
		end_date=date(2025, 6, 2),
		total_amount=Decimal("10.00"),
	))
	db_session.commit()


def test_prefix_uses_utc_calendar_date():
	assert booking_number_prefix(datetime(2025, 11, 28, 9, 0)) == "CP-20251128-"
	# 23:30 in UTC-5 is already the next day in UTC
	local = datetime(2025, 6, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
	assert booking_number_prefix(local) == "CP-20250602-"


def test_first_number_of_the_day(db_session, tour_package):
	assert generate_booking_number(db_session, datetime(2025, 11, 28)) == "CP-20251128-0001"


def test_sequence_counts_only_same_day(db_session, tour_package):
	_insert(db_session, tour_package.id, "CP-20251128-0001")
	_insert(db_session, tour_package.id, "CP-20251128-0002")
	_insert(db_session, tour_package.id, "CP-20251127-0001")

	assert generate_booking_number(db_session, datetime(2025, 11, 28)) == "CP-20251128-0003"
	assert generate_booking_number(db_session, datetime(2025, 11, 27)) == "CP-20251127-0002"
	assert generate_booking_number(db_session, datetime(2025, 11, 29)) == "CP-20251129-0001"


def test_created_bookings_get_increasing_numbers(make_booking):
	numbers = [make_booking().booking_number for _ in range(3)]

	assert len(set(numbers)) == 3
	sequences = [int(n.rsplit("-", 1)[1]) for n in numbers]
	assert sequences == sorted(sequences)
	assert sequences[0] == 1
