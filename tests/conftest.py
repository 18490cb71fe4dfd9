from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from cycleparadise.core.config import Settings
from cycleparadise.core.security import hash_password
from cycleparadise.db.models import TourPackage, AdminUser, DifficultyLevel
from cycleparadise.db.session import Database
from cycleparadise.main import create_app
from cycleparadise.repositories.bookings import BookingRepository, BookingCreateData
from cycleparadise.services.email_service import EmailService

ADMIN_EMAIL = "admin@cycleparadise.lk"
ADMIN_PASSWORD = "s3cret-pass"


class RecordingEmailService(EmailService):
	"""Keeps outgoing mail in memory instead of talking to SMTP."""

	def __init__(self, fail: bool = False):
		super().__init__(
			smtp_host="localhost",
			smtp_port=25,
			username="",
			password="",
			from_email="noreply@cycleparadise.lk",
			contact_email="info@cycleparadise.lk",
			admin_email=ADMIN_EMAIL,
		)
		self.fail = fail
		self.sent = []

	def send_email(self, to, template, cc=None, bcc=None):
		self.sent.append((to, template))
		return not self.fail

	@property
	def subjects(self):
		return [template.subject for _, template in self.sent]


@pytest.fixture
def database(tmp_path):
	db = Database(f"sqlite:///{tmp_path / 'test.db'}")
	db.create_all()
	yield db
	db.dispose()


@pytest.fixture
def db_session(database):
	session = database.session()
	yield session
	session.close()


@pytest.fixture
def tour_package(db_session):
	package = TourPackage(
		title="Hill Country Explorer",
		slug="hill-country-explorer",
		short_description="Tea estates and misty climbs",
		duration=5,
		difficulty_level=DifficultyLevel.MODERATE,
		region="Central Highlands",
		base_price=Decimal("500.00"),
		max_participants=10,
	)
	db_session.add(package)
	db_session.commit()
	return package


@pytest.fixture
def admin_user(db_session):
	admin = AdminUser(
		email=ADMIN_EMAIL,
		password_hash=hash_password(ADMIN_PASSWORD),
		first_name="Nimal",
		last_name="Perera",
	)
	db_session.add(admin)
	db_session.commit()
	return admin


@pytest.fixture
def repository(db_session):
	return BookingRepository(db_session)


@pytest.fixture
def make_booking(repository, tour_package):
	def _make(**overrides):
		data = dict(
			package_id=tour_package.id,
			customer_name="Jane Doe",
			customer_email="jane@example.com",
			customer_phone="+94 77 123 4567",
			customer_country="Sri Lanka",
			number_of_participants=2,
			start_date=date(2025, 6, 1),
			end_date=date(2025, 6, 5),
			total_amount=500,
		)
		data.update(overrides)
		return repository.create(BookingCreateData(**data))
	return _make


@pytest.fixture
def email_service():
	return RecordingEmailService()


@pytest.fixture
def client(database, email_service):
	app = create_app(settings=Settings(create_tables=False), database=database, email_service=email_service)
	with TestClient(app) as test_client:
		yield test_client


@pytest.fixture
def auth_headers(client, admin_user):
	response = client.post("/api/admin/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
	assert response.status_code == 200, response.text
	return {"Authorization": f"Bearer {response.json()['accessToken']}"}
