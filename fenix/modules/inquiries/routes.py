"""
Inquiries Routes
================

Provides:
- POST /api/inquiries -- public quote request (CORS)
- GET  /admin/inquiries -- list (?status=, ?search=)
- GET  /admin/inquiries/<id> -- detail; opening a New inquiry marks it Viewed
- PATCH /admin/inquiries/<id> -- update status / admin notes
- POST /admin/inquiries/<id>/reply -- email the customer
"""

import logging

from flask import request, jsonify
from flask_cors import cross_origin

from fenix.core.auth import admin_required
from fenix.core.config import Config
from . import inquiries_bp
from .models import (
    init_inquiries_db, get_inquiries, get_inquiry, update_inquiry, INQUIRY_STATUSES
)
from .workflows import submit_quote_request, reply_to_inquiry

logger = logging.getLogger(__name__)


@inquiries_bp.route('/api/inquiries', methods=['POST', 'OPTIONS'])
@cross_origin(origins=Config.CORS_ORIGINS, supports_credentials=False)
def quote_request():
    """Quote request form on the product pages"""
    init_inquiries_db()
    result = submit_quote_request(request.get_json(silent=True))
    if result['error']:
        status = 500 if result['error'] == 'Failed to submit quote request' else 400
        return jsonify({'error': result['error']}), status
    return jsonify({
        'message': 'Quote request received. Our team will contact you shortly.',
        'id': result['data']['id'],
    }), 201


@inquiries_bp.route('/admin/inquiries', methods=['GET'])
@admin_required
def inquiry_list():
    init_inquiries_db()
    status = request.args.get('status')
    if status and status not in INQUIRY_STATUSES:
        return jsonify({'error': 'Invalid status'}), 400
    return jsonify({
        'inquiries': get_inquiries(status=status, search=request.args.get('search'))
    }), 200


@inquiries_bp.route('/admin/inquiries/<int:inquiry_id>', methods=['GET'])
@admin_required
def inquiry_detail(inquiry_id):
    inquiry = get_inquiry(inquiry_id)
    if not inquiry:
        return jsonify({'error': 'Inquiry not found'}), 404
    if inquiry['status'] == 'New':
        inquiry = update_inquiry(inquiry_id, status='Viewed') or inquiry
    return jsonify({'inquiry': inquiry}), 200


@inquiries_bp.route('/admin/inquiries/<int:inquiry_id>', methods=['PATCH', 'PUT'])
@admin_required
def inquiry_update(inquiry_id):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400
    status = data.get('status')
    if status is not None and status not in INQUIRY_STATUSES:
        return jsonify({'error': 'Invalid status'}), 400
    if not get_inquiry(inquiry_id):
        return jsonify({'error': 'Inquiry not found'}), 404

    inquiry = update_inquiry(inquiry_id, status=status, admin_notes=data.get('admin_notes'))
    if not inquiry:
        return jsonify({'error': 'Failed to update inquiry'}), 500
    return jsonify({'inquiry': inquiry}), 200


@inquiries_bp.route('/admin/inquiries/<int:inquiry_id>/reply', methods=['POST'])
@admin_required
def inquiry_reply(inquiry_id):
    data = request.get_json(silent=True) or {}
    result = reply_to_inquiry(inquiry_id, data.get('message', ''))
    if result['success']:
        return jsonify({'message': 'Reply sent', 'inquiry': get_inquiry(inquiry_id)}), 200
    status = {
        'Inquiry not found': 404,
        'Message is required': 400,
        'Failed to send email': 502,
    }.get(result['error'], 500)
    return jsonify({'error': result['error']}), status
