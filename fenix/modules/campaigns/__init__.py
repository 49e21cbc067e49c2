"""
Campaigns Module
================

Provides:
- Campaign CRUD over saved email templates
- Batched, concurrent blast sending to all active subscribers
- Per-recipient personalization ({{name}}, {{email}}, {{unsubscribe_url}})
- Preview with a sample recipient
"""

from flask import Blueprint

campaigns_bp = Blueprint(
    'campaigns',
    __name__,
    url_prefix='/admin/campaigns',
)

from . import routes
