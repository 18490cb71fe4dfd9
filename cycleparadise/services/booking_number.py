from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from cycleparadise.db.models import Booking

BOOKING_NUMBER_PREFIX = "CP"


def booking_number_prefix(now: Optional[datetime] = None) -> str:
	"""Return the ``CP-YYYYMMDD-`` prefix for the UTC calendar date of ``now``."""
	now = now or datetime.now(timezone.utc)
	if now.tzinfo is not None:
		now = now.astimezone(timezone.utc)
	return f"{BOOKING_NUMBER_PREFIX}-{now.strftime('%Y%m%d')}-"


def generate_booking_number(db: Session, now: Optional[datetime] = None) -> str:
	"""Next booking number for the day, e.g. ``CP-20251128-0001``.

	The sequence is the count of bookings already numbered with today's prefix,
	plus one, zero padded to four digits. It is not capped at 9999, and two
	concurrent callers can read the same count: the unique constraint on
	``bookings.booking_number`` is what rejects the loser.
	"""
	prefix = booking_number_prefix(now)
	count = db.query(Booking).filter(Booking.booking_number.startswith(prefix, autoescape=True)).count()
	return f"{prefix}{count + 1:04d}"
