"""
Campaigns Models
================

Database schema and CRUD operations for email campaigns.
Tables live in USER_DB alongside templates and subscribers.

Status lifecycle:
    Draft | Scheduled --(send)--> Sending --> Sent (at least one delivered)
                                          \\--> Draft (nothing delivered, or error)
"""

import sqlite3
import logging

from fenix.core.database import Database

logger = logging.getLogger(__name__)

CAMPAIGN_STATUSES = ('Draft', 'Scheduled', 'Sending', 'Sent')

# Columns update_campaign is allowed to write
UPDATABLE_FIELDS = (
    'name', 'template_id', 'subject', 'status', 'scheduled_at',
    'sent_at', 'sent_count', 'open_count', 'click_count',
)


def _db_log(level, message, details=None):
    """Log to framework's persistent DB logger"""
    try:
        from fenix.core import db_log
        db_log(level, 'campaigns', message, details)
    except Exception as e:
        logger.debug(f"db_log unavailable: {e}")


def get_db_config():
    """Get the database path from config or environment (3-tier pattern)"""
    return Database.get_db_path('USER_DB', 'users.db')


def init_campaigns_db():
    """Create the campaigns table in USER_DB"""
    try:
        db_path = get_db_config()
        Database.ensure_dir(db_path)

        with sqlite3.connect(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS campaigns (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    template_id INTEGER,
                    subject TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'Draft',
                    scheduled_at TIMESTAMP,
                    sent_at TIMESTAMP,
                    sent_count INTEGER DEFAULT 0,
                    open_count INTEGER DEFAULT 0,
                    click_count INTEGER DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_campaigns_status
                ON campaigns(status)
            ''')
            conn.commit()
            logger.info("Campaigns database table created/verified successfully")

    except Exception as e:
        logger.error(f"Error initializing campaigns database: {e}")
        _db_log('error', 'Failed to init campaigns DB', {'error': str(e)})
        raise


def get_campaign(campaign_id):
    """Get a single campaign by ID"""
    try:
        with sqlite3.connect(get_db_config()) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute('SELECT * FROM campaigns WHERE id = ?', (campaign_id,))
            row = cursor.fetchone()
            return dict(row) if row else None
    except Exception as e:
        logger.error(f"Error getting campaign {campaign_id}: {e}")
        _db_log('error', f'Error getting campaign {campaign_id}', {'error': str(e)})
        return None


def get_all_campaigns():
    """Get all campaigns with their template name, most recent first"""
    try:
        with sqlite3.connect(get_db_config()) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'email_templates'")
            if cursor.fetchone():
                cursor.execute('''
                    SELECT c.*, t.name AS template_name
                    FROM campaigns c
                    LEFT JOIN email_templates t ON t.id = c.template_id
                    ORDER BY c.created_at DESC, c.id DESC
                ''')
            else:
                cursor.execute('SELECT * FROM campaigns ORDER BY created_at DESC, id DESC')
            return [dict(row) for row in cursor.fetchall()]
    except Exception as e:
        logger.error(f"Error getting all campaigns: {e}")
        _db_log('error', 'Error getting all campaigns', {'error': str(e)})
        return []


def create_campaign(data):
    """Create a campaign in Draft, or Scheduled when scheduled_at is given.

    Returns the new campaign dict or None.
    """
    try:
        scheduled_at = data.get('scheduled_at') or None
        status = 'Scheduled' if scheduled_at else 'Draft'

        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO campaigns (name, template_id, subject, status, scheduled_at)
                VALUES (?, ?, ?, ?, ?)
            ''', (
                data.get('name', ''),
                data.get('template_id') or None,
                data.get('subject', ''),
                status,
                scheduled_at
            ))
            campaign_id = cursor.lastrowid
            conn.commit()

        logger.info(f"Created campaign {campaign_id}: {data.get('name')}")
        return get_campaign(campaign_id)

    except Exception as e:
        logger.error(f"Error creating campaign: {e}")
        _db_log('error', 'Error creating campaign', {'error': str(e)})
        return None


def update_campaign(campaign_id, fields):
    """Write the given allow-listed fields and touch updated_at.

    Raises on database errors so the dispatch workflow can react to a failed
    status write. Unknown fields are ignored.
    """
    fields = {k: v for k, v in (fields or {}).items() if k in UPDATABLE_FIELDS}
    if 'status' in fields and fields['status'] not in CAMPAIGN_STATUSES:
        raise ValueError(f"Invalid campaign status: {fields['status']}")

    assignments = ''.join(f'{key} = ?, ' for key in fields)
    with sqlite3.connect(get_db_config()) as conn:
        cursor = conn.cursor()
        cursor.execute(
            f'UPDATE campaigns SET {assignments}updated_at = CURRENT_TIMESTAMP WHERE id = ?',
            (*fields.values(), campaign_id)
        )
        updated = cursor.rowcount
        conn.commit()

    logger.info(f"Updated campaign {campaign_id}: {', '.join(fields) or 'touch'}")
    return updated > 0


def delete_campaign(campaign_id):
    """Delete a campaign"""
    try:
        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM campaigns WHERE id = ?', (campaign_id,))
            deleted = cursor.rowcount
            conn.commit()
        logger.info(f"Deleted campaign {campaign_id}")
        return deleted > 0
    except Exception as e:
        logger.error(f"Error deleting campaign {campaign_id}: {e}")
        _db_log('error', f'Error deleting campaign {campaign_id}', {'error': str(e)})
        return False
