import os
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """
    Base configuration for the Fenix framework.
    Projects override any of these via environment variables or app.config.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Database paths - use environment variables or fallback to DB_DIR
    USER_DB = os.getenv('USER_DB', os.path.join(DB_DIR, "users.db"))
    ANALYTICS_DB = os.getenv('ANALYTICS_DB', os.path.join(DB_DIR, "analytics_log.db"))

    # Email settings
    EMAIL_PROVIDER = os.getenv('EMAIL_PROVIDER', 'resend')
    EMAIL_ADDRESS = os.getenv("EMAIL_ADDRESS", "Fenix Brokers <onboarding@resend.dev>")
    EMAIL_PASSWORD = os.getenv("EMAIL_PASSWORD")
    EMAIL_HOST = os.getenv("EMAIL_HOST", "smtp.gmail.com")
    EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))

    # Resend API settings
    RESEND_API_KEY = os.getenv('RESEND_API_KEY') or os.getenv('RESEND')

    # Branding used by the email compiler and notifications
    EMAIL_BRAND_NAME = os.getenv('EMAIL_BRAND_NAME', 'Fenix Brokers')
    EMAIL_BRAND_TAGLINE = os.getenv('EMAIL_BRAND_TAGLINE', 'Premium Wholesale Cosmetics & Fragrances')
    EMAIL_WEBSITE_URL = os.getenv('EMAIL_WEBSITE_URL', os.getenv('BASE_URL', 'https://fenixbrokers.com'))
    EMAIL_ADMIN_EMAIL = os.getenv('EMAIL_ADMIN_EMAIL')

    # Campaign dispatch pacing (tune to the email provider's rate limits)
    CAMPAIGN_BATCH_SIZE = int(os.getenv('CAMPAIGN_BATCH_SIZE', '10'))
    CAMPAIGN_BATCH_DELAY = float(os.getenv('CAMPAIGN_BATCH_DELAY', '1.0'))

    # Origins allowed to call the public storefront endpoints (subscribe, quote request)
    CORS_ORIGINS = [o.strip() for o in os.getenv(
        'CORS_ORIGINS',
        'https://fenixbrokers.com,https://www.fenixbrokers.com,http://localhost:3000'
    ).split(',') if o.strip()]
