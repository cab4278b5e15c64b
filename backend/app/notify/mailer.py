"""
Notification dispatcher: format a result list and send it over SMTP.
Uses EMAIL_USER / EMAIL_PASS against SMTP_HOST:SMTP_PORT with STARTTLS.
"""

import logging
import smtplib
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

from app.config import Settings, get_settings
from app.errors import DispatchError, ValidationError
from app.notify.formatter import partition_results, render_results_html, render_results_text
from app.search.schemas import EmailRequest

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Email sent successfully!"


class MailTransport(Protocol):
    def send(self, message: MIMEMultipart) -> None: ...


class SmtpTransport:
    def __init__(self, settings: Settings):
        self.settings = settings

    def send(self, message: MIMEMultipart) -> None:
        if not self.settings.email_user or not self.settings.email_pass:
            raise DispatchError("EMAIL_USER and EMAIL_PASS environment variables are required")
        try:
            with smtplib.SMTP(
                self.settings.smtp_host,
                self.settings.smtp_port,
                timeout=self.settings.request_timeout_seconds,
            ) as server:
                server.starttls()
                server.login(self.settings.email_user, self.settings.email_pass)
                server.send_message(message)
        except smtplib.SMTPAuthenticationError as e:
            raise DispatchError("Mail server rejected the credentials") from e
        except (smtplib.SMTPException, OSError) as e:
            raise DispatchError(f"Failed to send email: {e}") from e
        except MessageError as e:
            raise DispatchError(f"Could not serialize email: {e}") from e


def build_message(request: EmailRequest, settings: Settings) -> MIMEMultipart:
    qa_results, social_results = partition_results(request.results or [])
    msg = MIMEMultipart("alternative")
    msg["From"] = settings.email_user
    msg["To"] = request.email
    msg["Subject"] = settings.email_subject
    # Last part is the preferred one
    msg.attach(MIMEText(render_results_text(qa_results, social_results), "plain", "utf-8"))
    msg.attach(MIMEText(render_results_html(qa_results, social_results), "html", "utf-8"))
    return msg


def validate_email_request(request: EmailRequest) -> None:
    if not request.email or not request.email.strip() or not request.results:
        raise ValidationError("Email and results are required")
    # Goes into the To header verbatim
    if "\r" in request.email or "\n" in request.email:
        raise ValidationError("Email address must not contain line breaks")


def send_results_email(
    request: EmailRequest,
    settings: Optional[Settings] = None,
    transport: Optional[MailTransport] = None,
) -> str:
    """
    Validate, format and send. No retry: a DispatchError goes straight to the caller.
    """
    validate_email_request(request)
    settings = settings or get_settings()
    transport = transport or SmtpTransport(settings)

    message = build_message(request, settings)
    try:
        transport.send(message)
    except DispatchError as e:
        logger.error("Error sending email to %s: %s", request.email, e)
        raise
    logger.info("Sent %d results to %s", len(request.results or []), request.email)
    return SUCCESS_MESSAGE
