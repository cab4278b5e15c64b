"""Notification: email formatting and dispatch."""

from .formatter import partition_results, render_results_html, render_results_text
from .mailer import SmtpTransport, send_results_email

__all__ = [
    "partition_results",
    "render_results_html",
    "render_results_text",
    "send_results_email",
    "SmtpTransport",
]
