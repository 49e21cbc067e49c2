"""
Templates Module
================

Provides:
- Block schema for the drag-and-drop email builder (blocks.py)
- HTML email compiler with Outlook/dark-mode/mobile support (renderer.py)
- Starter presets (presets.py)
- Template CRUD with compiled HTML kept in sync, live preview
"""

from flask import Blueprint

templates_bp = Blueprint(
    'email_templates',
    __name__,
    url_prefix='/admin/templates',
)

from . import routes
