"""
Quote request and reply workflows.

Both build HTML email bodies from user-supplied text (storefront form fields,
admin reply messages), so every interpolated value is entity-escaped before
it reaches the transport.
"""

import logging

from flask import current_app

from fenix.core.config import Config
from fenix.modules.email import is_valid_email
from fenix.modules.templates.sanitizer import escape_html, safe_url
from .models import create_inquiry, get_inquiry, append_thread_message

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('product_name', 'company_name', 'contact_person', 'email')


def _db_log(level, message, details=None):
    """Log to framework's persistent DB logger"""
    try:
        from fenix.core import db_log
        db_log(level, 'inquiries', message, details)
    except Exception as e:
        logger.debug(f"db_log unavailable: {e}")


def _setting(key, default=None):
    try:
        value = current_app.config.get(key)
        if value is not None:
            return value
    except RuntimeError:
        pass
    return getattr(Config, key, default)


def _default_transport():
    from fenix.modules.email import email_service
    return email_service


def _send_ok(result):
    if isinstance(result, dict):
        return bool(result.get('success'))
    return bool(result)


def multiline(text):
    """Escape plain text and keep its line breaks"""
    return escape_html(text).replace('\r\n', '\n').replace('\n', '<br>')


def validate_quote_request(data):
    """Return an error message, or None when the request is complete"""
    if not isinstance(data, dict):
        return 'No data provided'
    missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or '').strip()]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    if not is_valid_email(str(data['email']).strip()):
        return 'Please enter a valid email address'
    try:
        if int(data.get('quantity', 0)) < 1:
            return 'Quantity must be at least 1'
    except (TypeError, ValueError):
        return 'Quantity must be a number'
    return None


def build_admin_notification(inquiry, base_url=''):
    rows = [
        ('Product', inquiry['product_name']),
        ('Company', inquiry['company_name']),
        ('Contact', inquiry['contact_person']),
        ('Email', inquiry['email']),
        ('Quantity', inquiry['quantity']),
    ]
    if inquiry.get('requirements'):
        rows.append(('Requirements', inquiry['requirements']))

    details = ''.join(f'<p><strong>{label}:</strong> {multiline(value)}</p>' for label, value in rows)
    if inquiry.get('attachment_url'):
        details += f'<p><a href="{safe_url(inquiry["attachment_url"])}">View attachment</a></p>'
    admin_url = safe_url(f"{(base_url or '').rstrip('/')}/admin/inquiries/{inquiry['id']}")
    return (f'<h2>New Quote Request Received</h2>{details}'
            f'<p><a href="{admin_url}">View in Admin</a></p>')


def build_reply(inquiry, message, brand_name):
    return (
        '<h2>Response to Your Quote Request</h2>'
        f'<p>Dear {escape_html(inquiry["contact_person"])},</p>'
        f'<p>{multiline(message)}</p>'
        '<hr>'
        '<p><em>Original Request:</em></p>'
        f'<p><strong>Product:</strong> {escape_html(inquiry["product_name"])}</p>'
        f'<p><strong>Quantity:</strong> {escape_html(inquiry["quantity"])}</p>'
        '<hr>'
        f'<p>Best regards,<br>{escape_html(brand_name)} Team</p>'
    )


def submit_quote_request(data, transport=None):
    """Store a quote request and notify the admin.

    Returns {'data': inquiry or None, 'error': str or None}. A failed admin
    notification is logged but does not fail the request.
    """
    error = validate_quote_request(data)
    if error:
        return {'data': None, 'error': error}

    try:
        clean = dict(data)
        clean['email'] = str(data['email']).strip().lower()
        clean['quantity'] = int(data['quantity'])
        inquiry = create_inquiry(clean)
        if not inquiry:
            return {'data': None, 'error': 'Failed to submit quote request'}

        _db_log('info', f'Quote request received: {inquiry["product_name"]}',
                {'id': inquiry['id'], 'company': inquiry['company_name']})

        admin_email = _setting('EMAIL_ADMIN_EMAIL')
        if not admin_email:
            logger.warning("EMAIL_ADMIN_EMAIL not set, skipping quote request notification")
            return {'data': inquiry, 'error': None}

        transport = transport or _default_transport()
        try:
            result = transport.send(
                to=admin_email,
                subject=f"New Quote Request: {inquiry['product_name']}",
                html=build_admin_notification(inquiry, _setting('EMAIL_WEBSITE_URL', '')),
            )
            if not _send_ok(result):
                logger.error(f"Admin notification for inquiry {inquiry['id']} failed: {result}")
        except Exception as e:
            logger.error(f"Error sending admin notification for inquiry {inquiry['id']}: {e}")
            _db_log('error', 'Quote notification failed', {'id': inquiry['id'], 'error': str(e)})

        return {'data': inquiry, 'error': None}

    except Exception as e:
        logger.error(f"Error in submit_quote_request: {e}")
        _db_log('error', 'Error in submit_quote_request', {'error': str(e)})
        return {'data': None, 'error': 'Failed to submit quote request'}


def reply_to_inquiry(inquiry_id, message, transport=None):
    """Email an admin reply to the customer and append it to the thread.

    The thread and status change only after the email was accepted.
    Returns {'success', 'error'}.
    """
    try:
        inquiry = get_inquiry(inquiry_id)
        if not inquiry:
            return {'success': False, 'error': 'Inquiry not found'}
        if not (message or '').strip():
            return {'success': False, 'error': 'Message is required'}

        transport = transport or _default_transport()
        result = transport.send(
            to=inquiry['email'],
            subject=f"Re: Quote Request - {inquiry['product_name']}",
            html=build_reply(inquiry, message, _setting('EMAIL_BRAND_NAME', 'Fenix Brokers')),
        )
        if not _send_ok(result):
            logger.error(f"Reply to inquiry {inquiry_id} not delivered: {result}")
            _db_log('error', f'Reply to inquiry {inquiry_id} not delivered')
            return {'success': False, 'error': 'Failed to send email'}

        append_thread_message(inquiry_id, 'admin', message)
        logger.info(f"Replied to inquiry {inquiry_id}")
        _db_log('info', f'Replied to inquiry {inquiry_id}')
        return {'success': True, 'error': None}

    except Exception as e:
        logger.error(f"Error in reply_to_inquiry {inquiry_id}: {e}")
        _db_log('error', f'Error replying to inquiry {inquiry_id}', {'error': str(e)})
        return {'success': False, 'error': 'Failed to reply to inquiry'}
