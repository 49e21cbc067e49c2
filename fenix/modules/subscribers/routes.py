"""
Subscribers Routes
==================

Provides:
- POST /api/subscribers -- public subscribe (CORS, storefront newsletter form)
- GET  /unsubscribe?email= -- one-click unsubscribe from the email footer link
- POST /unsubscribe -- unsubscribe via JSON or form body
- GET  /admin/subscribers -- list (?status=, ?search=)
- POST /admin/subscribers/<id>/unsubscribe
- DELETE /admin/subscribers/<id>
"""

import logging

from flask import request, jsonify, current_app
from flask_cors import cross_origin

from fenix.core.auth import admin_required
from fenix.core.config import Config
from fenix.modules.templates.sanitizer import escape_html
from . import subscribers_bp
from .models import (
    init_subscribers_db, subscribe_email, get_subscribers, get_subscriber_count,
    unsubscribe_by_id, unsubscribe_by_email, delete_subscriber, SUBSCRIBER_STATUSES
)

logger = logging.getLogger(__name__)


def _get_brand_name():
    """Get the brand name for user-facing messages"""
    try:
        return current_app.config.get('EMAIL_BRAND_NAME', 'our newsletter')
    except RuntimeError:
        return 'our newsletter'


def _error_status(error):
    if error == 'Failed to unsubscribe':
        return 500
    if error == 'Email address not found':
        return 404
    return 400


# ===================
# PUBLIC ROUTES
# ===================

@subscribers_bp.route('/api/subscribers', methods=['POST', 'OPTIONS'])
@cross_origin(origins=Config.CORS_ORIGINS, supports_credentials=False)
def subscribe():
    """Handle new subscription requests from the storefront"""
    init_subscribers_db()
    data = request.get_json(silent=True)
    if not data or not data.get('email'):
        return jsonify({'error': 'Email address is required'}), 400

    result = subscribe_email(data['email'], data.get('name'), data.get('company'))
    if not result['success']:
        status = 400 if result['error'] == 'Please enter a valid email address' else 500
        return jsonify({'error': result['error']}), status

    if result['already_subscribed']:
        return jsonify({'message': 'You are already subscribed!', 'already_subscribed': True}), 200
    if result['reactivated']:
        return jsonify({'message': 'Welcome back! Your subscription has been reactivated.'}), 200
    return jsonify({'message': f'Successfully subscribed! Welcome to {_get_brand_name()}.'}), 201


@subscribers_bp.route('/unsubscribe', methods=['GET'])
def unsubscribe_link():
    """Landing page for the unsubscribe link in every campaign email"""
    email = request.args.get('email', '')
    result = unsubscribe_by_email(email)
    brand = escape_html(_get_brand_name())
    if result['success']:
        body = (f"<h1>You have been unsubscribed</h1>"
                f"<p>{escape_html(email)} will no longer receive emails from {brand}.</p>")
        return body, 200, {'Content-Type': 'text/html; charset=utf-8'}
    body = f"<h1>Unsubscribe failed</h1><p>{escape_html(result['error'])}</p>"
    return body, _error_status(result['error']), {'Content-Type': 'text/html; charset=utf-8'}


@subscribers_bp.route('/unsubscribe', methods=['POST'])
def unsubscribe():
    """Handle unsubscribe requests"""
    data = request.get_json(silent=True) or request.form
    email = data.get('email') or request.args.get('email', '')
    result = unsubscribe_by_email(email)
    if result['success']:
        return jsonify({'message': 'You have been unsubscribed'}), 200
    return jsonify({'error': result['error']}), _error_status(result['error'])


# ===================
# ADMIN ROUTES
# ===================

@subscribers_bp.route('/admin/subscribers', methods=['GET'])
@admin_required
def subscriber_list():
    init_subscribers_db()
    status = request.args.get('status')
    if status and status not in SUBSCRIBER_STATUSES:
        return jsonify({'error': 'Invalid status'}), 400
    subscribers = get_subscribers(status=status, search=request.args.get('search'))
    return jsonify({'subscribers': subscribers, 'active_count': get_subscriber_count()}), 200


@subscribers_bp.route('/admin/subscribers/<int:subscriber_id>/unsubscribe', methods=['POST'])
@admin_required
def admin_unsubscribe(subscriber_id):
    result = unsubscribe_by_id(subscriber_id)
    if result['success']:
        return jsonify({'message': 'Subscriber unsubscribed'}), 200
    status = 404 if result['error'] == 'Subscriber not found' else 500
    return jsonify({'error': result['error']}), status


@subscribers_bp.route('/admin/subscribers/<int:subscriber_id>', methods=['DELETE'])
@admin_required
def admin_delete(subscriber_id):
    result = delete_subscriber(subscriber_id)
    if result['success']:
        return jsonify({'message': 'Subscriber deleted'}), 200
    status = 404 if result['error'] == 'Subscriber not found' else 500
    return jsonify({'error': result['error']}), status
