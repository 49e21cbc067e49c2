"""
Templates Routes
================

Admin JSON routes for email templates. All routes require an admin session.
"""

import logging

from flask import request, jsonify

from fenix.core.auth import admin_required
from . import templates_bp
from .blocks import find_nesting_errors
from .models import (
    init_templates_db, get_template, get_all_templates, create_template,
    update_template, delete_template, get_brand
)
from .presets import get_presets, get_preset_by_id

logger = logging.getLogger(__name__)


def _db_log(level, message, details=None):
    """Log to framework's persistent DB logger"""
    try:
        from fenix.core import db_log
        db_log(level, 'templates', message, details)
    except Exception as e:
        logger.debug(f"db_log unavailable: {e}")


@templates_bp.route('/', methods=['GET'])
@admin_required
def template_list():
    init_templates_db()
    return jsonify({'templates': get_all_templates()}), 200


@templates_bp.route('/<int:template_id>', methods=['GET'])
@admin_required
def template_detail(template_id):
    template = get_template(template_id)
    if not template:
        return jsonify({'error': 'Template not found'}), 404
    return jsonify({'template': template}), 200


@templates_bp.route('/', methods=['POST'])
@admin_required
def template_create():
    """Create a template; html_content is compiled from the blocks"""
    data = request.get_json(silent=True)
    if not data or not data.get('name'):
        return jsonify({'error': 'Template name is required'}), 400
    if not isinstance(data.get('content', []), list):
        return jsonify({'error': 'Template content must be a list of blocks'}), 400

    init_templates_db()
    template = create_template(data)
    if not template:
        return jsonify({'error': 'Failed to create template'}), 500

    _db_log('info', f'Template created: {template["name"]}', {'id': template['id']})
    return jsonify({
        'template': template,
        'warnings': find_nesting_errors(template['content']),
    }), 201


@templates_bp.route('/<int:template_id>', methods=['PUT', 'PATCH'])
@admin_required
def template_update(template_id):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400
    if 'content' in data and not isinstance(data['content'], list):
        return jsonify({'error': 'Template content must be a list of blocks'}), 400
    data.pop('html_content', None)

    if not get_template(template_id):
        return jsonify({'error': 'Template not found'}), 404

    template = update_template(template_id, data)
    if not template:
        return jsonify({'error': 'Failed to update template'}), 500

    _db_log('info', f'Template updated: {template["name"]}', {'id': template_id})
    return jsonify({
        'template': template,
        'warnings': find_nesting_errors(template['content']),
    }), 200


@templates_bp.route('/<int:template_id>', methods=['DELETE'])
@admin_required
def template_delete(template_id):
    if delete_template(template_id):
        _db_log('info', 'Template deleted', {'id': template_id})
        return jsonify({'message': 'Template deleted'}), 200
    return jsonify({'error': 'Failed to delete template'}), 500


@templates_bp.route('/preview', methods=['POST'])
@admin_required
def preview():
    """Render blocks to HTML for the sandboxed live preview frame.

    Preview failures never affect saving; the editor shows the message.
    """
    from fenix.modules.campaigns.dispatch import preview_blocks

    try:
        data = request.get_json(silent=True) or {}
        html = preview_blocks(data.get('blocks') or data.get('content') or [],
                              data.get('name') or 'Preview', brand=get_brand())
        return jsonify({'html': html}), 200
    except Exception as e:
        logger.error(f"Error rendering preview: {e}")
        _db_log('error', 'Error rendering preview', {'error': str(e)})
        return jsonify({'error': 'Preview failed'}), 500


@templates_bp.route('/presets', methods=['GET'])
@admin_required
def presets():
    category = request.args.get('category')
    items = get_presets()
    if category:
        items = [p for p in items if p['category'] == category]
    return jsonify({'presets': items}), 200


@templates_bp.route('/from-preset/<preset_id>', methods=['POST'])
@admin_required
def create_from_preset(preset_id):
    preset = get_preset_by_id(preset_id)
    if not preset:
        return jsonify({'error': 'Preset not found'}), 404

    data = request.get_json(silent=True) or {}
    init_templates_db()
    template = create_template({
        'name': data.get('name') or preset['name'],
        'subject': data.get('subject') or preset['name'],
        'content': preset['blocks'],
    })
    if not template:
        return jsonify({'error': 'Failed to create template'}), 500
    return jsonify({'template': template}), 201
