"""
Inquiries Module
================

Provides:
- Public quote request endpoint for the storefront (POST /api/inquiries)
- Admin inquiry inbox with status and notes (/admin/inquiries)
- Email replies to customers, recorded in the inquiry's message thread
"""

from flask import Blueprint

inquiries_bp = Blueprint('inquiries', __name__)

from . import routes
