"""
Email adapter for the memberhub backend.

The default implementation uses SMTP, reading credentials from Settings.
Bodies are rendered from the Jinja2 templates in memberhub/templates.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import smtplib
import ssl

import structlog
from jinja2 import Environment, PackageLoader, select_autoescape

from .config import get_settings

logger = structlog.get_logger(__name__)

_templates = Environment(
    loader=PackageLoader("memberhub", "templates"),
    autoescape=select_autoescape(["html"]),
)


def render(template_name: str, **context) -> str:
    return _templates.get_template(template_name).render(**context)


def send_email(subject: str, to_email: str, html_body: str, text_body: str | None = None) -> bool:
    """
    Send an email with the SMTP credentials from the environment.
    Returns False without sending when SMTP is not configured.
    """
    settings = get_settings()
    if not (
        settings.smtp_host
        and settings.smtp_user
        and settings.smtp_password
        and settings.smtp_from
        and settings.smtp_port
    ):
        logger.warning("email.smtp_not_configured", to=to_email)
        return False
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.smtp_from
    msg["To"] = to_email
    plain = text_body or html_body
    msg.attach(MIMEText(plain, "plain", "utf-8"))
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    port = settings.smtp_port or 465
    try:
        if port == 465:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(settings.smtp_host, port, context=context) as server:
                server.login(settings.smtp_user, settings.smtp_password)
                server.sendmail(settings.smtp_from, [to_email], msg.as_string())
        else:
            with smtplib.SMTP(settings.smtp_host, port) as server:
                server.ehlo()
                server.starttls(context=ssl.create_default_context())
                server.login(settings.smtp_user, settings.smtp_password)
                server.sendmail(settings.smtp_from, [to_email], msg.as_string())
        logger.info("email.sent", to=to_email, subject=subject)
        return True
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("email.send_failed", to=to_email, error=str(exc))
        return False


def send_verification_email(to_email: str, code: str, ttl_seconds: int) -> bool:
    minutes = max(1, ttl_seconds // 60)
    context = {"code": code, "minutes": minutes}
    return send_email(
        "Your verification code",
        to_email,
        render("verification_code.html", **context),
        render("verification_code.txt", **context),
    )
