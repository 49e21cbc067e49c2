"""
Email Service Module
====================

Transactional email transport supporting Resend and SMTP.
Provider is selected via EMAIL_PROVIDER config ('resend' or 'smtp').

Every call to send() is independent and fallible: the result dict carries
success/error instead of raising, and each attempt is written to email_logs.
"""

import re
import logging
import sqlite3
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import parseaddr
from typing import List, Optional, Dict, Any, Union

import resend

from fenix.core.database import Database

# Rejects consecutive dots, leading/trailing dots in local part
_VALID_EMAIL = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{2,}$')

logger = logging.getLogger(__name__)


def is_valid_email(address: str) -> bool:
    return bool(address) and len(address) <= 255 and _VALID_EMAIL.match(address.strip()) is not None


class EmailService:
    """
    Configurable email service supporting Resend and SMTP.

    Configuration (set in Flask app.config):
        EMAIL_PROVIDER: 'resend' (default) or 'smtp'
        RESEND_API_KEY: Your Resend API key (required if provider is 'resend')
        EMAIL_HOST: SMTP server host (default: 'smtp.gmail.com')
        EMAIL_PORT: SMTP server port (default: 587)
        EMAIL_PASSWORD: SMTP password/app password (required if provider is 'smtp')
        EMAIL_ADDRESS: Sender address, may include a display name
        EMAIL_BRAND_NAME: Brand name for notifications
        EMAIL_ADMIN_EMAIL: Admin notification address
        USER_DB: Path to SQLite database for email logs
    """

    def __init__(self, app=None):
        self.provider = 'resend'
        self.api_key = None
        self.sender_email = None
        self.brand_name = 'Fenix Brokers'
        self.website_url = 'https://fenixbrokers.com'
        self.admin_email = None
        self.user_db = None
        self.smtp_host = 'smtp.gmail.com'
        self.smtp_port = 587
        self.smtp_password = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize email service with Flask app configuration"""
        self.provider = (app.config.get('EMAIL_PROVIDER') or 'resend').lower()
        logger.info(f"=== INITIALIZING EMAIL SERVICE (provider: {self.provider}) ===")

        self.sender_email = app.config.get('EMAIL_ADDRESS') or 'onboarding@resend.dev'
        self.brand_name = app.config.get('EMAIL_BRAND_NAME', self.brand_name)
        self.website_url = app.config.get('EMAIL_WEBSITE_URL', self.website_url)
        self.admin_email = app.config.get('EMAIL_ADMIN_EMAIL')
        self.user_db = app.config.get('USER_DB')

        logger.info(f"Sender email: {self.sender_email}")

        if self.provider == 'smtp':
            self._init_smtp(app)
        else:
            self._init_resend(app)

    def _init_resend(self, app):
        """Initialize Resend provider"""
        self.api_key = app.config.get('RESEND_API_KEY')

        if not self.api_key:
            logger.warning("RESEND_API_KEY not configured - email sending disabled")
            return

        resend.api_key = self.api_key
        logger.info("Resend API client initialized successfully")

    def _init_smtp(self, app):
        """Initialize SMTP provider"""
        self.smtp_host = app.config.get('EMAIL_HOST', 'smtp.gmail.com')
        self.smtp_port = int(app.config.get('EMAIL_PORT', 587))
        self.smtp_password = app.config.get('EMAIL_PASSWORD')

        if not self.smtp_password:
            logger.warning("EMAIL_PASSWORD not configured - SMTP email sending disabled")
            return

        logger.info(f"SMTP configured: {self.smtp_host}:{self.smtp_port}")

    @property
    def is_configured(self) -> bool:
        if self.provider == 'smtp':
            return bool(self.smtp_password)
        return bool(self.api_key)

    def _log_email(self, recipient: str, subject: str, status: str,
                   error_message: Optional[str] = None):
        """Log email attempt to database"""
        try:
            db_path = self.user_db or Database.get_db_path('USER_DB', 'users.db')
            with sqlite3.connect(db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS email_logs (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        recipient TEXT NOT NULL,
                        subject TEXT NOT NULL,
                        status TEXT NOT NULL,
                        error_message TEXT,
                        sent_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
                cursor.execute("""
                    INSERT INTO email_logs (recipient, subject, status, error_message)
                    VALUES (?, ?, ?, ?)
                """, (recipient, subject, status, error_message))
                conn.commit()
        except Exception as e:
            logger.error(f"Failed to log email to database: {e}")

    def send(self, to: Union[str, List[str]], subject: str, html: str,
             text: Optional[str] = None) -> Dict[str, Any]:
        """
        Send one email via the configured provider.

        Args:
            to: Recipient address, or a list of addresses for one message
            subject: Email subject
            html: HTML content of the email
            text: Plain text alternative (optional)

        Returns:
            dict: {'success': bool, 'error': str or None, 'id': provider message id or None}
        """
        recipients = [to] if isinstance(to, str) else list(to or [])
        recipients = [addr.strip() for addr in recipients if addr]

        if not recipients:
            logger.error("No recipients provided")
            return {'success': False, 'error': 'No recipients provided', 'id': None}

        invalid = [addr for addr in recipients if not is_valid_email(addr)]
        if invalid:
            logger.warning(f"Skipping invalid email address: {', '.join(invalid)}")
            return {'success': False, 'error': f'Invalid email address: {invalid[0]}', 'id': None}

        if not self.is_configured:
            missing = 'EMAIL_PASSWORD' if self.provider == 'smtp' else 'RESEND_API_KEY'
            logger.error(f"Email provider '{self.provider}' is not configured")
            return {
                'success': False,
                'error': f'Email service not configured. Please add {missing} to your environment.',
                'id': None,
            }

        logger.info(f"Sending email from: {self.sender_email} to: {', '.join(recipients)}")

        try:
            if self.provider == 'smtp':
                result = self._send_via_smtp(recipients, subject, html, text)
            else:
                result = self._send_via_resend(recipients, subject, html, text)
        except Exception as send_error:
            logger.error(f"Error sending to {', '.join(recipients)}: {send_error}")
            result = {'success': False, 'error': str(send_error) or 'Failed to send email', 'id': None}

        for recipient in recipients:
            self._log_email(recipient, subject, 'sent' if result['success'] else 'failed', result['error'])

        return result

    def _send_via_resend(self, recipients: List[str], subject: str, html: str,
                         text: Optional[str] = None) -> Dict[str, Any]:
        """Send a single message via Resend API"""
        email_params = {
            "from": self.sender_email,
            "to": recipients,
            "subject": subject,
            "html": html,
        }
        if text:
            email_params["text"] = text

        r = resend.Emails.send(email_params)
        logger.debug(f"Resend response: {r}")

        message_id = r.get('id') if r else None
        if message_id:
            return {'success': True, 'error': None, 'id': message_id}

        logger.error(f"Resend error for {recipients}: {r}")
        return {'success': False, 'error': 'Failed to send email', 'id': None}

    def _send_via_smtp(self, recipients: List[str], subject: str, html: str,
                       text: Optional[str] = None) -> Dict[str, Any]:
        """Send a single message via SMTP"""
        msg = MIMEMultipart('alternative')
        msg['From'] = self.sender_email
        msg['To'] = ', '.join(recipients)
        msg['Subject'] = subject

        if text:
            msg.attach(MIMEText(text, 'plain', 'utf-8'))
        msg.attach(MIMEText(html, 'html', 'utf-8'))

        with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
            server.starttls()
            server.login(parseaddr(self.sender_email)[1], self.smtp_password)
            server.send_message(msg)

        logger.info(f"SMTP email sent to {', '.join(recipients)}")
        return {'success': True, 'error': None, 'id': None}


# Global email service instance
email_service = EmailService()
