"""
Subscribers Models
==================

Newsletter subscribers in USER_DB. Emails are stored lower-cased and are
unique; unsubscribing keeps the row with status 'unsubscribed' so a later
signup reactivates it.
"""

import re
import sqlite3
import logging

from fenix.core.database import Database
from fenix.modules.email import is_valid_email

logger = logging.getLogger(__name__)

SUBSCRIBER_STATUSES = ('active', 'unsubscribed')


def _db_log(level, message, details=None):
    """Log to framework's persistent DB logger"""
    try:
        from fenix.core import db_log
        db_log(level, 'subscribers', message, details)
    except Exception as e:
        logger.debug(f"db_log unavailable: {e}")


def get_db_config():
    """Get the database path from config or environment (3-tier pattern)"""
    return Database.get_db_path('USER_DB', 'users.db')


def init_subscribers_db():
    """Initialize the subscribers table in the database"""
    try:
        db_path = get_db_config()
        Database.ensure_dir(db_path)

        with sqlite3.connect(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS subscribers (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT UNIQUE NOT NULL,
                    name TEXT,
                    company TEXT,
                    status TEXT NOT NULL DEFAULT 'active',
                    subscribed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_subscribers_status
                ON subscribers(status, subscribed_at)
            ''')
            conn.commit()
            logger.info("Subscribers database table created/verified successfully")

    except Exception as e:
        logger.error(f"Error initializing subscribers database: {e}")
        _db_log('error', 'Failed to init subscribers DB', {'error': str(e)})
        raise


def extract_name_from_email(email):
    """Guess a display name from the local part: 'maria.lopez42@x.com' -> 'Maria Lopez'"""
    local_part = (email or '').split('@')[0]
    normalized = re.sub(r'\d+', '', re.sub(r'[._-]', ' ', local_part)).strip()
    if not normalized:
        return 'Subscriber'
    return ' '.join(word.capitalize() for word in normalized.split())


def subscribe_email(email, name=None, company=None):
    """Add or reactivate a subscriber.

    Returns {'success', 'error', 'already_subscribed', 'reactivated'}.
    """
    result = {'success': False, 'error': None, 'already_subscribed': False, 'reactivated': False}
    email = (email or '').lower().strip()
    if not is_valid_email(email):
        result['error'] = 'Please enter a valid email address'
        return result

    try:
        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT id, status FROM subscribers WHERE email = ?', (email,))
            existing = cursor.fetchone()

            if existing:
                subscriber_id, status = existing
                if status == 'active':
                    result.update(success=True, already_subscribed=True)
                    return result

                cursor.execute('''
                    UPDATE subscribers SET status = 'active', updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                ''', (subscriber_id,))
                conn.commit()
                logger.info(f"Reactivated subscription for: {email}")
                _db_log('info', f'Subscriber reactivated: {email}')
                result.update(success=True, reactivated=True)
                return result

            cursor.execute('''
                INSERT INTO subscribers (email, name, company, status)
                VALUES (?, ?, ?, 'active')
            ''', (email, (name or '').strip() or extract_name_from_email(email), company or None))
            conn.commit()

        logger.info(f"New subscription added: {email}")
        _db_log('info', f'New subscriber: {email}')
        result['success'] = True
        return result

    except Exception as e:
        logger.error(f"Error subscribing {email}: {e}")
        _db_log('error', 'Error in subscribe', {'email': email, 'error': str(e)})
        result['error'] = 'Failed to subscribe'
        return result


def get_subscribers(status=None, search=None):
    """List subscribers, newest first, optionally filtered by status and a
    case-insensitive search over email, name and company."""
    try:
        query = 'SELECT * FROM subscribers'
        clauses, params = [], []
        if status:
            clauses.append('status = ?')
            params.append(status)
        if search:
            like = f'%{search.lower()}%'
            clauses.append('(LOWER(email) LIKE ? OR LOWER(name) LIKE ? OR LOWER(company) LIKE ?)')
            params.extend([like, like, like])
        if clauses:
            query += ' WHERE ' + ' AND '.join(clauses)
        query += ' ORDER BY subscribed_at DESC, id DESC'

        with sqlite3.connect(get_db_config()) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]
    except Exception as e:
        logger.error(f"Error fetching subscribers: {e}")
        _db_log('error', 'Error fetching subscribers', {'error': str(e)})
        return []


def get_active_subscribers():
    """Current active recipients, read fresh on every call.

    Raises on database errors: an unreadable list must not look like an
    empty one to the campaign dispatcher.
    """
    with sqlite3.connect(get_db_config()) as conn:
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM subscribers WHERE status = 'active' ORDER BY id")
        return [dict(row) for row in cursor.fetchall()]


def get_subscriber_count():
    """Get active subscriber count"""
    try:
        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM subscribers WHERE status = 'active'")
            return cursor.fetchone()[0]
    except Exception as e:
        logger.error(f"Error counting subscribers: {e}")
        return 0


def _set_status(where, value, status):
    with sqlite3.connect(get_db_config()) as conn:
        cursor = conn.cursor()
        cursor.execute(
            f'UPDATE subscribers SET status = ?, updated_at = CURRENT_TIMESTAMP WHERE {where} = ?',
            (status, value)
        )
        changed = cursor.rowcount
        conn.commit()
    return changed > 0


def unsubscribe_by_id(subscriber_id):
    """Returns {'success', 'error'}"""
    try:
        if not _set_status('id', subscriber_id, 'unsubscribed'):
            return {'success': False, 'error': 'Subscriber not found'}
        logger.info(f"Subscriber {subscriber_id} unsubscribed by admin")
        _db_log('info', 'Subscriber unsubscribed', {'id': subscriber_id})
        return {'success': True, 'error': None}
    except Exception as e:
        logger.error(f"Error unsubscribing {subscriber_id}: {e}")
        _db_log('error', 'Error unsubscribing', {'id': subscriber_id, 'error': str(e)})
        return {'success': False, 'error': 'Failed to unsubscribe'}


def unsubscribe_by_email(email):
    """Handler behind the {{unsubscribe_url}} link. Returns {'success', 'error'}"""
    email = (email or '').lower().strip()
    if not email:
        return {'success': False, 'error': 'Email address is required'}
    try:
        if not _set_status('email', email, 'unsubscribed'):
            return {'success': False, 'error': 'Email address not found'}
        logger.info(f"Unsubscribed: {email}")
        _db_log('info', f'Unsubscribed: {email}')
        return {'success': True, 'error': None}
    except Exception as e:
        logger.error(f"Error unsubscribing {email}: {e}")
        _db_log('error', 'Error unsubscribing', {'email': email, 'error': str(e)})
        return {'success': False, 'error': 'Failed to unsubscribe'}


def delete_subscriber(subscriber_id):
    """Returns {'success', 'error'}"""
    try:
        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM subscribers WHERE id = ?', (subscriber_id,))
            deleted = cursor.rowcount
            conn.commit()
        if not deleted:
            return {'success': False, 'error': 'Subscriber not found'}
        logger.info(f"Deleted subscriber {subscriber_id}")
        return {'success': True, 'error': None}
    except Exception as e:
        logger.error(f"Error deleting subscriber {subscriber_id}: {e}")
        _db_log('error', 'Error deleting subscriber', {'id': subscriber_id, 'error': str(e)})
        return {'success': False, 'error': 'Failed to delete subscriber'}
