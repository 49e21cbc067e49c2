"""
Subscribers Module
==================

Provides:
- Public API for newsletter subscriptions (POST /api/subscribers)
- Unsubscribe handler behind the {{unsubscribe_url}} link (/unsubscribe)
- Admin list, unsubscribe and delete (/admin/subscribers)
- Active recipient lookup used by the campaign dispatcher
"""

from flask import Blueprint

subscribers_bp = Blueprint('subscribers', __name__)

from . import routes
