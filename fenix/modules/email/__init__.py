"""
Email Module
============

Transactional email transport (Resend or SMTP) shared by the campaign
dispatcher, inquiry replies and admin notifications.
"""

from .email_service import EmailService, email_service, is_valid_email

__all__ = ['EmailService', 'email_service', 'is_valid_email']
