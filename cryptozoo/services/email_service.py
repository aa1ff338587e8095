"""Best-effort email notifications for the edit request workflow.

Delivery never blocks or rolls back the operation that triggered it: the
function-backed provider falls back to logging, and ``EmailService`` logs and
discards anything a provider still raises.
"""
from __future__ import annotations

import html
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

ACTION_TEXT = {"create": "Create", "update": "Update", "delete": "Delete"}
TYPE_TEXT = {"vertex": "Primitive", "edge": "Construction"}
STATUS_COLOR = {"approved": "#10b981", "rejected": "#ef4444"}

EMAIL_STYLE = """
      body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
      .container { max-width: 600px; margin: 0 auto; padding: 20px; }
      .header { background-color: #4f46e5; color: white; padding: 20px; text-align: center; }
      .content { padding: 20px; background-color: #f9fafb; }
      .footer { text-align: center; padding: 20px; color: #6b7280; font-size: 14px; }
      .highlight { background-color: #e0e7ff; padding: 10px; border-radius: 5px; margin: 10px 0; }
      .notes { background-color: #fef3c7; padding: 10px; border-radius: 5px; margin: 10px 0; }
"""


class EmailProvider(Protocol):
    """Protocol for email delivery backends."""
    
    def send_email(self, to: str, subject: str, html_body: str) -> None:
        """Deliver one HTML email."""
        ...


class LoggingEmailProvider:
    """Logs emails instead of sending them (development and fallback)."""
    
    def send_email(self, to: str, subject: str, html_body: str) -> None:
        logger.info(f"[EMAIL] To: {to} | Subject: {subject} | {len(html_body)} bytes of HTML")
        logger.debug(html_body)


class FunctionEmailProvider:
    """Sends email through the hosted server-side function that accepts {to, subject, html}."""
    
    def __init__(self, base_url: str, api_key: str, function_name: str = "send-email",
                 timeout: float = 10.0, client: httpx.Client | None = None) -> None:
        self._url = f"{base_url.rstrip('/')}/functions/v1/{function_name}"
        self._headers = {"apikey": api_key, "Authorization": f"Bearer {api_key}"}
        self._client = client or httpx.Client(timeout=timeout)
        self._fallback = LoggingEmailProvider()
    
    def send_email(self, to: str, subject: str, html_body: str) -> None:
        try:
            response = self._client.post(
                self._url,
                json={"to": to, "subject": subject, "html": html_body},
                headers=self._headers,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            # No retry: log and hand the message to the logging provider
            logger.error(f"Failed to send email via server function: {e}")
            self._fallback.send_email(to, subject, html_body)

    def close(self) -> None:
        self._client.close()


def _format_time(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M UTC")
    return str(value or "")


def _details(request: Dict[str, Any], reviewed: bool = False) -> str:
    action = ACTION_TEXT.get(request.get("action"), str(request.get("action")))
    entity = TYPE_TEXT.get(request.get("type"), str(request.get("type")))
    lines = [f"Action: {action} {entity}<br>"]
    if request.get("target_id"):
        lines.append(f"Target ID: {html.escape(str(request['target_id']))}<br>")
    lines.append(f"Submitted: {_format_time(request.get('submitted_at'))}<br>")
    if reviewed:
        lines.append(f"Reviewed: {_format_time(request.get('reviewed_at') or datetime.now(timezone.utc))}<br>")
    if request.get("comments"):
        label = "Your Comments" if reviewed else "Notes"
        lines.append(f"{label}: {html.escape(str(request['comments']))}<br>")
    return "\n          ".join(lines)


class EmailService:
    """Renders and dispatches edit request notifications."""
    
    def __init__(self, provider: EmailProvider, site_url: str = "https://www.crypto-zoo.net") -> None:
        self._provider = provider
        self._site_url = site_url
    
    def _page(self, title: str, body: str) -> str:
        site = html.escape(self._site_url)
        site_label = html.escape(self._site_url.split("://", 1)[-1])
        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>{EMAIL_STYLE}    </style>
</head>
<body>
    <div class="container">
      <div class="header">
        <h1>Crypto Zoo</h1>
        <p>{title}</p>
      </div>
      <div class="content">
        {body}
      </div>
      <div class="footer">
        <p>Crypto Zoo - A comprehensive database of cryptographic primitives and constructions</p>
        <p><a href="{site}">{site_label}</a></p>
      </div>
    </div>
</body>
</html>
"""
    
    def render_confirmation(self, request: Dict[str, Any]) -> str:
        body = f"""<h2>Thank you for your submission!</h2>
        <p>We have received your edit request and it is currently under review.</p>
        <div class="highlight">
          <strong>Request Details:</strong><br>
          {_details(request)}
        </div>
        <p>You will receive another email once your request has been reviewed by our team.</p>"""
        return self._page("Edit Request Submitted", body)
    
    def render_status_update(self, request: Dict[str, Any], status: str,
                             reviewer_notes: Optional[str] = None) -> str:
        status_text = status.capitalize()
        notes = ""
        if reviewer_notes:
            notes = f"""<div class="notes">
          <strong>Reviewer Notes:</strong><br>
          {html.escape(reviewer_notes)}
        </div>"""
        if status == "approved":
            closing = "<p>Your changes have been applied to the database. Thank you for contributing to Crypto Zoo!</p>"
        else:
            closing = ("<p>If you have any questions about this decision, please feel free to submit "
                       "a new request with additional context.</p>")
        body = f"""<div style="background-color: {STATUS_COLOR.get(status, '#6b7280')}; color: white; padding: 10px; text-align: center;">
          Your edit request has been <strong>{status_text.lower()}</strong>
        </div>
        <div class="highlight">
          <strong>Request Details:</strong><br>
          {_details(request, reviewed=True)}
        </div>
        {notes}
        {closing}"""
        return self._page(f"Edit Request {status_text}", body)
    
    def send_edit_request_confirmation(self, email: str, request: Dict[str, Any]) -> bool:
        """Send the submission receipt. Returns False if delivery failed."""
        try:
            self._provider.send_email(email, "Edit Request Submitted - Crypto Zoo", self.render_confirmation(request))
            return True
        except Exception:
            logger.exception(f"Failed to send confirmation email to {email}")
            return False
    
    def send_edit_request_status_update(self, email: str, request: Dict[str, Any], status: str,
                                        reviewer_notes: Optional[str] = None) -> bool:
        """Send the review decision. Returns False if delivery failed."""
        subject = f"Edit Request {status.capitalize()} - Crypto Zoo"
        try:
            self._provider.send_email(email, subject, self.render_status_update(request, status, reviewer_notes))
            return True
        except Exception:
            logger.exception(f"Failed to send status update email to {email}")
            return False
