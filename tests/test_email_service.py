import smtplib
from email import message_from_string

import pytest

from cycleparadise.core.config import Settings
from cycleparadise.services import email_service as email_module
from cycleparadise.services.email_service import (
	EmailService, EmailTemplate, BookingEmailDetails, booking_confirmation_template, custom_message_template,
)


class FakeSMTP:
	instances = []

	def __init__(self, host, port, timeout=None):
		self.host = host
		self.port = port
		self.calls = []
		self.sent = []
		FakeSMTP.instances.append(self)

	def starttls(self):
		self.calls.append("starttls")

	def login(self, user, password):
		self.calls.append(("login", user, password))

	def sendmail(self, sender, recipients, body):
		self.sent.append((sender, recipients, body))

	def noop(self):
		self.calls.append("noop")

	def quit(self):
		self.calls.append("quit")


class RefusingSMTP(FakeSMTP):
	def sendmail(self, sender, recipients, body):
		raise smtplib.SMTPRecipientsRefused({recipients[0]: (550, b"no such user")})


@pytest.fixture
def fake_smtp(monkeypatch):
	FakeSMTP.instances = []
	monkeypatch.setattr(email_module.smtplib, "SMTP", FakeSMTP)
	monkeypatch.setattr(email_module.smtplib, "SMTP_SSL", FakeSMTP)
	return FakeSMTP


def _service(port=587, username="mailer"):
	return EmailService(
		smtp_host="smtp.example.com",
		smtp_port=port,
		username=username,
		password="pw",
		from_email="noreply@example.com",
		contact_email="info@example.com",
		admin_email="ops@example.com",
	)


def _details():
	return BookingEmailDetails(
		booking_number="CP-20250601-0001",
		customer_name="Jane <Doe>",
		package_title="Hill Country Explorer",
		start_date="June 1, 2025",
		number_of_participants=2,
		total_amount=500,
	)


def test_confirmation_template_escapes_and_formats():
	template = booking_confirmation_template(_details(), "info@example.com")

	assert template.subject == "Booking Confirmation - CP-20250601-0001"
	assert "Jane &lt;Doe&gt;" in template.html
	assert "LKR 500.00" in template.html
	assert "info@example.com" in template.html


def test_custom_template_keeps_subject_and_escapes_message():
	template = custom_message_template("Your ride", "Bring <gloves>", "CP-20250601-0001", "Jane", "Coastal Ride")

	assert template.subject == "Your ride"
	assert "Bring &lt;gloves&gt;" in template.html
	assert "Regarding booking: CP-20250601-0001" in template.html


def test_send_email_uses_starttls_and_login(fake_smtp):
	service = _service()

	assert service.send_email("jane@example.com", EmailTemplate(subject="Hi", html="<p>Hello <b>there</b></p>")) is True

	server = fake_smtp.instances[0]
	assert (server.host, server.port) == ("smtp.example.com", 587)
	assert server.calls == ["starttls", ("login", "mailer", "pw"), "quit"]
	sender, recipients, body = server.sent[0]
	assert sender == "noreply@example.com"
	assert recipients == ["jane@example.com"]
	message = message_from_string(body)
	assert message["Subject"] == "Hi"
	plain = message.get_payload()[0].get_payload()
	assert plain.strip() == "Hello there"


def test_ssl_port_skips_starttls_and_anonymous_skips_login(fake_smtp):
	service = _service(port=465, username="")

	assert service.use_ssl is True
	service.send_email("jane@example.com", EmailTemplate(subject="Hi", html="<p>x</p>"))

	assert fake_smtp.instances[0].calls == ["quit"]


def test_cc_and_bcc_reach_the_envelope_but_bcc_stays_hidden(fake_smtp):
	_service().send_email(
		["a@example.com", "b@example.com"],
		EmailTemplate(subject="Hi", html="<p>x</p>"),
		cc=["c@example.com"],
		bcc=["d@example.com"],
	)

	_, recipients, body = fake_smtp.instances[0].sent[0]
	assert recipients == ["a@example.com", "b@example.com", "c@example.com", "d@example.com"]
	message = message_from_string(body)
	assert message["To"] == "a@example.com, b@example.com"
	assert message["Cc"] == "c@example.com"
	assert message["Bcc"] is None


def test_refused_delivery_returns_false(monkeypatch):
	monkeypatch.setattr(email_module.smtplib, "SMTP", RefusingSMTP)

	assert _service().send_email("ghost@example.com", EmailTemplate(subject="Hi", html="<p>x</p>")) is False


def test_unreachable_server_returns_false(monkeypatch):
	def refuse(*args, **kwargs):
		raise ConnectionRefusedError("connection refused")

	monkeypatch.setattr(email_module.smtplib, "SMTP", refuse)

	service = _service()
	assert service.send_email("jane@example.com", EmailTemplate(subject="Hi", html="<p>x</p>")) is False
	assert service.verify_connection() is False


def test_admin_notification_defaults_to_admin_address(fake_smtp):
	_service().send_admin_notification("New booking", "<p>CP-20250601-0001</p>")

	_, recipients, body = fake_smtp.instances[0].sent[0]
	assert recipients == ["ops@example.com"]
	assert message_from_string(body)["Subject"] == "[Cycle Paradise Admin] New booking"


def test_verify_connection(fake_smtp):
	assert _service().verify_connection() is True
	assert "noop" in fake_smtp.instances[0].calls


def test_from_settings():
	service = EmailService.from_settings(Settings(smtp_host="mail.example.com", smtp_port=465, from_email="x@example.com"))

	assert service.smtp_host == "mail.example.com"
	assert service.use_ssl is True
	assert service.from_email == "x@example.com"
