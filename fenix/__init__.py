"""
Fenix - B2B catalog email marketing for Flask
=============================================

Provides:
- Block-based email templates compiled to client-compatible HTML
- Campaign dispatch to newsletter subscribers in rate-limited batches
- Subscriber signup/unsubscribe and quote request inquiries

Usage:
    from flask import Flask
    from fenix import Fenix

    app = Flask(__name__)
    Fenix(app)
"""

import logging

from .core.config import Config

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

# Config keys copied onto app.config when the host app has not set them
CONFIG_KEYS = (
    'SECRET_KEY', 'DB_DIR', 'USER_DB', 'ANALYTICS_DB',
    'EMAIL_PROVIDER', 'RESEND_API_KEY', 'EMAIL_ADDRESS', 'EMAIL_PASSWORD',
    'EMAIL_HOST', 'EMAIL_PORT', 'EMAIL_BRAND_NAME', 'EMAIL_BRAND_TAGLINE',
    'EMAIL_WEBSITE_URL', 'EMAIL_ADMIN_EMAIL',
    'CAMPAIGN_BATCH_SIZE', 'CAMPAIGN_BATCH_DELAY',
)


class Fenix:
    """Flask extension wiring config, databases, email and blueprints"""

    def __init__(self, app=None, config=None):
        self.modules = []
        if app is not None:
            self.init_app(app, config)

    def init_app(self, app, config=None):
        from .core import Database
        from .modules.email import email_service
        from .modules.campaigns import campaigns_bp
        from .modules.campaigns.models import init_campaigns_db
        from .modules.inquiries import inquiries_bp
        from .modules.inquiries.models import init_inquiries_db
        from .modules.subscribers import subscribers_bp
        from .modules.subscribers.models import init_subscribers_db
        from .modules.templates import templates_bp
        from .modules.templates.models import init_templates_db

        if config:
            app.config.update(config)
        for key in CONFIG_KEYS:
            if app.config.get(key) is None:
                app.config[key] = getattr(Config, key, None)

        Database.ensure_dir(app.config['USER_DB'])
        with app.app_context():
            init_templates_db()
            init_campaigns_db()
            init_subscribers_db()
            init_inquiries_db()

        email_service.init_app(app)

        for name, bp in (('templates', templates_bp), ('campaigns', campaigns_bp),
                         ('subscribers', subscribers_bp), ('inquiries', inquiries_bp)):
            app.register_blueprint(bp)
            self.modules.append(name)

        @app.context_processor
        def inject_brand():
            return {'brand_name': app.config.get('EMAIL_BRAND_NAME')}

        app.extensions['fenix'] = self
        logger.info(f"Fenix initialised with modules: {', '.join(self.modules)}")

    def get_registered_modules(self):
        return list(self.modules)


__all__ = ['Fenix', 'Config', '__version__']
