"""
Campaigns Routes
================

Admin CRUD, send, reset and preview routes for email campaigns.
All routes require an admin session.
"""

import logging

from flask import request, jsonify

from fenix.core.auth import admin_required
from . import campaigns_bp
from .dispatch import send_campaign, preview_campaign
from .models import (
    init_campaigns_db, get_campaign, get_all_campaigns, create_campaign,
    update_campaign, delete_campaign
)

logger = logging.getLogger(__name__)

# Fields an admin may edit; status/metrics are owned by the dispatcher
EDITABLE_FIELDS = ('name', 'template_id', 'subject', 'scheduled_at')


def _db_log(level, message, details=None):
    """Log to framework's persistent DB logger"""
    try:
        from fenix.core import db_log
        db_log(level, 'campaigns', message, details)
    except Exception as e:
        logger.debug(f"db_log unavailable: {e}")


@campaigns_bp.route('/', methods=['GET'])
@admin_required
def campaign_list():
    init_campaigns_db()
    return jsonify({'campaigns': get_all_campaigns()}), 200


@campaigns_bp.route('/', methods=['POST'])
@admin_required
def create():
    """Create a campaign (Draft, or Scheduled when scheduled_at is set)"""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400
    if not data.get('name') or not data.get('template_id'):
        return jsonify({'error': 'Campaign name and template are required'}), 400

    init_campaigns_db()
    campaign = create_campaign(data)
    if not campaign:
        return jsonify({'error': 'Failed to create campaign'}), 500

    _db_log('info', f'Campaign created: {campaign["name"]}', {'id': campaign['id']})
    return jsonify({'campaign': campaign}), 201


@campaigns_bp.route('/<int:campaign_id>', methods=['PUT', 'PATCH'])
@admin_required
def update(campaign_id):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    campaign = get_campaign(campaign_id)
    if not campaign:
        return jsonify({'error': 'Campaign not found'}), 404
    if campaign['status'] == 'Sending':
        return jsonify({'error': 'Campaign is currently sending'}), 409

    fields = {k: data[k] for k in EDITABLE_FIELDS if k in data}
    if 'scheduled_at' in fields and campaign['status'] in ('Draft', 'Scheduled'):
        fields['status'] = 'Scheduled' if fields['scheduled_at'] else 'Draft'

    try:
        update_campaign(campaign_id, fields)
    except Exception as e:
        logger.error(f"Error updating campaign {campaign_id}: {e}")
        _db_log('error', f'Error updating campaign {campaign_id}', {'error': str(e)})
        return jsonify({'error': 'Failed to update campaign'}), 500

    return jsonify({'campaign': get_campaign(campaign_id)}), 200


@campaigns_bp.route('/<int:campaign_id>', methods=['DELETE'])
@admin_required
def delete(campaign_id):
    if delete_campaign(campaign_id):
        logger.info(f"Campaign {campaign_id} deleted")
        _db_log('info', 'Campaign deleted', {'id': campaign_id})
        return jsonify({'message': 'Campaign deleted'}), 200
    return jsonify({'error': 'Failed to delete campaign'}), 500


@campaigns_bp.route('/<int:campaign_id>/send', methods=['POST'])
@admin_required
async def send(campaign_id):
    """Send campaign to all active subscribers"""
    init_campaigns_db()
    campaign = get_campaign(campaign_id)
    if not campaign:
        return jsonify({'error': 'Campaign not found'}), 404
    if campaign['status'] == 'Sending':
        return jsonify({'error': 'Campaign is already sending'}), 409

    result = await send_campaign(campaign_id)
    if result['success']:
        result['message'] = (f"Campaign sent to {result['sent_count']} of "
                             f"{result['total_subscribers']} subscribers")
        return jsonify(result), 200
    return jsonify(result), 400


@campaigns_bp.route('/<int:campaign_id>/reset', methods=['POST'])
@admin_required
def reset(campaign_id):
    """Return a campaign left in Sending by an interrupted dispatch to Draft"""
    campaign = get_campaign(campaign_id)
    if not campaign:
        return jsonify({'error': 'Campaign not found'}), 404
    if campaign['status'] != 'Sending':
        return jsonify({'error': 'Only a campaign stuck in Sending can be reset'}), 409

    try:
        update_campaign(campaign_id, {'status': 'Draft'})
    except Exception as e:
        logger.error(f"Error resetting campaign {campaign_id}: {e}")
        _db_log('error', f'Error resetting campaign {campaign_id}', {'error': str(e)})
        return jsonify({'error': 'Failed to reset campaign'}), 500

    logger.warning(f"Campaign {campaign_id} reset from Sending to Draft by admin")
    _db_log('warning', 'Campaign reset to Draft', {'id': campaign_id})
    return jsonify({'campaign': get_campaign(campaign_id)}), 200


@campaigns_bp.route('/<int:campaign_id>/preview', methods=['GET'])
@admin_required
def preview(campaign_id):
    result = preview_campaign(campaign_id)
    if result['error']:
        status = 404 if result['error'].endswith('not found') else 500
        return jsonify(result), status
    return jsonify(result), 200


@campaigns_bp.route('/subscriber-count', methods=['GET'])
@admin_required
def subscriber_count():
    """Return the current active subscriber count"""
    from fenix.modules.subscribers.models import get_subscriber_count
    return jsonify({'count': get_subscriber_count()}), 200
