from fastapi import Depends, Request
from sqlalchemy.orm import Session

from cycleparadise.db.session import get_db
from cycleparadise.repositories.bookings import BookingRepository
from cycleparadise.repositories.catalog import TourPackageRepository, CyclingGuideRepository
from cycleparadise.services.email_service import EmailService


def get_email_service(request: Request) -> EmailService:
	return request.app.state.email_service


def get_booking_repository(db: Session = Depends(get_db)) -> BookingRepository:
	return BookingRepository(db)


def get_package_repository(db: Session = Depends(get_db)) -> TourPackageRepository:
	return TourPackageRepository(db)


def get_guide_repository(db: Session = Depends(get_db)) -> CyclingGuideRepository:
	return CyclingGuideRepository(db)
