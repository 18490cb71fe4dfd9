import html as _html
import logging
import re
import smtplib
from contextlib import contextmanager
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional

from cycleparadise.core.config import Settings

logger = logging.getLogger(__name__)

SIGNATURE = "<p>Best regards,<br>Cycle Paradise Team</p>"


@dataclass
class EmailTemplate:
	subject: str
	html: str
	text: Optional[str] = None


@dataclass
class BookingEmailDetails:
	booking_number: str
	customer_name: str
	package_title: str
	start_date: str
	number_of_participants: int
	total_amount: float


def _wrap(body: str) -> str:
	return f'<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">{body}</div>'


def _details_box(title: str, items: list[tuple[str, str]], extra: str = "") -> str:
	lines = "".join(f"<li><strong>{label}:</strong> {_html.escape(str(value))}</li>" for label, value in items)
	return (
		'<div style="background: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">'
		f'<h3>{title}</h3><ul style="list-style: none; padding: 0;">{lines}</ul>{extra}</div>'
	)


def booking_confirmation_template(details: BookingEmailDetails, contact_email: str) -> EmailTemplate:
	box = _details_box("Booking Details", [
		("Booking Number", details.booking_number),
		("Package", details.package_title),
		("Start Date", details.start_date),
		("Participants", details.number_of_participants),
		("Total Amount", f"LKR {details.total_amount:.2f}"),
	])
	body = (
		'<h2 style="color: #22c55e;">Booking Confirmation</h2>'
		f"<p>Dear {_html.escape(details.customer_name)},</p>"
		"<p>Thank you for your booking with Cycle Paradise! Your booking request has been received and is being processed.</p>"
		f"{box}"
		"<p>Our team will contact you within 24 hours to confirm your booking and provide payment instructions.</p>"
		f"<p>If you have any questions, please contact us at {_html.escape(contact_email)}</p>"
		f"{SIGNATURE}"
	)
	return EmailTemplate(subject=f"Booking Confirmation - {details.booking_number}", html=_wrap(body))


def cancellation_template(
	booking_number: str,
	customer_name: str,
	package_title: str,
	contact_email: str,
	notes: Optional[str] = None,
) -> EmailTemplate:
	extra = f"<p><strong>Note:</strong> {_html.escape(notes)}</p>" if notes else ""
	box = _details_box("Booking Details", [
		("Booking Number", booking_number),
		("Package", package_title),
	], extra)
	body = (
		'<h2 style="color: #dc2626;">Booking Cancelled</h2>'
		f"<p>Dear {_html.escape(customer_name)},</p>"
		"<p>We regret to inform you that your booking has been cancelled.</p>"
		f"{box}"
		f"<p>If you have any questions, please contact us at {_html.escape(contact_email)}</p>"
		f"{SIGNATURE}"
	)
	return EmailTemplate(subject=f"Booking Cancellation - {booking_number}", html=_wrap(body))


def payment_confirmed_template(booking_number: str, customer_name: str, total_amount: float) -> EmailTemplate:
	box = _details_box("Payment Details", [
		("Amount Paid", f"USD {total_amount:.2f}"),
		("Payment Status", "PAID"),
	])
	body = (
		'<h2 style="color: #22c55e;">Payment Confirmed</h2>'
		f"<p>Dear {_html.escape(customer_name)},</p>"
		f"<p>We have received your payment for booking <strong>{_html.escape(booking_number)}</strong>.</p>"
		f"{box}"
		"<p>Thank you for your payment. We look forward to seeing you on the tour!</p>"
		f"{SIGNATURE}"
	)
	return EmailTemplate(subject=f"Payment Confirmed - {booking_number}", html=_wrap(body))


def custom_message_template(
	subject: str,
	message: str,
	booking_number: str,
	customer_name: str,
	package_title: str,
) -> EmailTemplate:
	body = (
		'<h2 style="color: #22c55e;">Message from Cycle Paradise</h2>'
		f"<p>Dear {_html.escape(customer_name)},</p>"
		f'<div style="white-space: pre-wrap;">{_html.escape(message)}</div>'
		'<hr style="margin: 20px 0; border: none; border-top: 1px solid #e5e7eb;">'
		'<p style="font-size: 12px; color: #6b7280;">'
		f"Regarding booking: {_html.escape(booking_number)}<br>Package: {_html.escape(package_title)}</p>"
		f"{SIGNATURE}"
	)
	return EmailTemplate(subject=subject, html=_wrap(body))


class EmailService:
	"""SMTP sender for transactional emails.

	``send_email`` reports failure through its return value and never raises, so
	a broken mail server cannot fail the booking operation that triggered it.
	"""

	def __init__(
		self,
		smtp_host: str,
		smtp_port: int,
		username: str,
		password: str,
		from_email: str,
		contact_email: str = "",
		admin_email: str = "",
		timeout: int = 10,
	):
		self.smtp_host = smtp_host
		self.smtp_port = smtp_port
		self.username = username
		self.password = password
		self.from_email = from_email
		self.contact_email = contact_email
		self.admin_email = admin_email
		self.timeout = timeout
		# port 465 speaks SSL from the first byte, everything else upgrades with STARTTLS
		self.use_ssl = smtp_port == 465

	@classmethod
	def from_settings(cls, settings: Settings) -> "EmailService":
		return cls(
			smtp_host=settings.smtp_host,
			smtp_port=settings.smtp_port,
			username=settings.smtp_user,
			password=settings.smtp_password,
			from_email=settings.from_email,
			contact_email=settings.contact_email,
			admin_email=settings.admin_email,
		)

	@contextmanager
	def _connection(self):
		server = None
		try:
			if self.use_ssl:
				server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, timeout=self.timeout)
			else:
				server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout)
				server.starttls()
			if self.username:
				server.login(self.username, self.password)
			yield server
		finally:
			if server:
				try:
					server.quit()
				except smtplib.SMTPException as e:
					logger.warning(f"Error closing SMTP connection: {e}")

	@staticmethod
	def strip_html(html: str) -> str:
		return re.sub(r"\s+", " ", re.sub(r"<[^>]*>", "", html)).strip()

	def _build_message(
		self,
		recipients: List[str],
		template: EmailTemplate,
		cc: Optional[List[str]] = None,
		bcc: Optional[List[str]] = None,
	) -> MIMEMultipart:
		msg = MIMEMultipart("alternative")
		msg["From"] = self.from_email
		msg["To"] = ", ".join(recipients)
		if cc:
			msg["Cc"] = ", ".join(cc)
		msg["Subject"] = template.subject
		msg.attach(MIMEText(template.text or self.strip_html(template.html), "plain"))
		msg.attach(MIMEText(template.html, "html"))
		return msg

	def send_email(
		self,
		to: str | List[str],
		template: EmailTemplate,
		cc: Optional[List[str]] = None,
		bcc: Optional[List[str]] = None,
	) -> bool:
		recipients = [to] if isinstance(to, str) else list(to)
		msg = self._build_message(recipients, template, cc)
		envelope = recipients + list(cc or []) + list(bcc or [])
		try:
			with self._connection() as server:
				server.sendmail(self.from_email, envelope, msg.as_string())
		except (smtplib.SMTPException, OSError) as e:
			logger.error(f"Failed to send email '{template.subject}' to {', '.join(recipients)}: {e}")
			return False
		logger.info(f"Email '{template.subject}' sent to {', '.join(recipients)}")
		return True

	def send_booking_confirmation(self, customer_email: str, details: BookingEmailDetails) -> bool:
		return self.send_email(customer_email, booking_confirmation_template(details, self.contact_email))

	def send_admin_notification(self, subject: str, content: str, admin_emails: Optional[List[str]] = None) -> bool:
		template = EmailTemplate(
			subject=f"[Cycle Paradise Admin] {subject}",
			html=_wrap(f'<h2 style="color: #1e40af;">Admin Notification</h2>{content}'),
		)
		return self.send_email(admin_emails or [self.admin_email], template)

	def verify_connection(self) -> bool:
		try:
			with self._connection() as server:
				server.noop()
		except (smtplib.SMTPException, OSError) as e:
			logger.error(f"Email service verification failed: {e}")
			return False
		logger.info("Email service connection verified")
		return True
