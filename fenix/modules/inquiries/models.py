"""
Inquiries Models
================

Quote requests from the storefront, stored in USER_DB.

message_threads is a JSON list of {'sender', 'message', 'timestamp'} entries.
It is only ever appended to, never rewritten.
"""

import json
import sqlite3
import logging
from datetime import datetime, timezone

from fenix.core.database import Database

logger = logging.getLogger(__name__)

INQUIRY_STATUSES = ('New', 'Viewed', 'In Progress', 'Closed')


def _db_log(level, message, details=None):
    """Log to framework's persistent DB logger"""
    try:
        from fenix.core import db_log
        db_log(level, 'inquiries', message, details)
    except Exception as e:
        logger.debug(f"db_log unavailable: {e}")


def get_db_config():
    """Get the database path from config or environment (3-tier pattern)"""
    return Database.get_db_path('USER_DB', 'users.db')


def init_inquiries_db():
    """Create the inquiries table in USER_DB"""
    try:
        db_path = get_db_config()
        Database.ensure_dir(db_path)

        with sqlite3.connect(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS inquiries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    product_id TEXT,
                    product_name TEXT NOT NULL,
                    company_name TEXT NOT NULL,
                    contact_person TEXT NOT NULL,
                    email TEXT NOT NULL,
                    quantity INTEGER NOT NULL DEFAULT 1,
                    requirements TEXT,
                    attachment_url TEXT,
                    status TEXT NOT NULL DEFAULT 'New',
                    admin_notes TEXT,
                    message_threads TEXT NOT NULL DEFAULT '[]',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_inquiries_status
                ON inquiries(status, created_at)
            ''')
            conn.commit()
            logger.info("Inquiries database table created/verified successfully")

    except Exception as e:
        logger.error(f"Error initializing inquiries database: {e}")
        _db_log('error', 'Failed to init inquiries DB', {'error': str(e)})
        raise


def _row_to_dict(row):
    return Database.row_to_dict(row, json_fields=('message_threads',))


def create_inquiry(data):
    """Insert a quote request with status New and an empty thread. Returns the dict or None."""
    try:
        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO inquiries (product_id, product_name, company_name, contact_person,
                                       email, quantity, requirements, attachment_url,
                                       status, message_threads)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'New', '[]')
            ''', (
                data.get('product_id') or None,
                data['product_name'],
                data['company_name'],
                data['contact_person'],
                data['email'],
                data['quantity'],
                data.get('requirements') or None,
                data.get('attachment_url') or None,
            ))
            inquiry_id = cursor.lastrowid
            conn.commit()

        logger.info(f"Created inquiry {inquiry_id} for {data['product_name']}")
        return get_inquiry(inquiry_id)

    except Exception as e:
        logger.error(f"Error creating inquiry: {e}")
        _db_log('error', 'Error creating inquiry', {'error': str(e)})
        return None


def get_inquiry(inquiry_id):
    """Get a single inquiry by ID"""
    try:
        with sqlite3.connect(get_db_config()) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute('SELECT * FROM inquiries WHERE id = ?', (inquiry_id,))
            row = cursor.fetchone()
            return _row_to_dict(row) if row else None
    except Exception as e:
        logger.error(f"Error getting inquiry {inquiry_id}: {e}")
        _db_log('error', f'Error getting inquiry {inquiry_id}', {'error': str(e)})
        return None


def get_inquiries(status=None, search=None):
    """List inquiries newest first, filtered by status and a case-insensitive
    search over company, product and email"""
    try:
        query = 'SELECT * FROM inquiries'
        clauses, params = [], []
        if status:
            clauses.append('status = ?')
            params.append(status)
        if search:
            like = f'%{search.lower()}%'
            clauses.append('(LOWER(company_name) LIKE ? OR LOWER(product_name) LIKE ? OR LOWER(email) LIKE ?)')
            params.extend([like, like, like])
        if clauses:
            query += ' WHERE ' + ' AND '.join(clauses)
        query += ' ORDER BY created_at DESC, id DESC'

        with sqlite3.connect(get_db_config()) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [_row_to_dict(row) for row in cursor.fetchall()]
    except Exception as e:
        logger.error(f"Error fetching inquiries: {e}")
        _db_log('error', 'Error fetching inquiries', {'error': str(e)})
        return []


def update_inquiry(inquiry_id, status=None, admin_notes=None):
    """Update status and/or admin notes. Returns the updated dict or None."""
    if status is not None and status not in INQUIRY_STATUSES:
        logger.warning(f"Rejected invalid inquiry status: {status}")
        return None
    try:
        fields = {}
        if status is not None:
            fields['status'] = status
        if admin_notes is not None:
            fields['admin_notes'] = admin_notes

        assignments = ''.join(f'{key} = ?, ' for key in fields)
        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f'UPDATE inquiries SET {assignments}updated_at = CURRENT_TIMESTAMP WHERE id = ?',
                (*fields.values(), inquiry_id)
            )
            updated = cursor.rowcount
            conn.commit()

        if not updated:
            return None
        return get_inquiry(inquiry_id)

    except Exception as e:
        logger.error(f"Error updating inquiry {inquiry_id}: {e}")
        _db_log('error', f'Error updating inquiry {inquiry_id}', {'error': str(e)})
        return None


def append_thread_message(inquiry_id, sender, message):
    """Append one entry to message_threads; New moves to In Progress on an admin reply.

    Read and write happen in one IMMEDIATE transaction so concurrent replies
    cannot drop each other's entries. Raises on database errors.
    """
    entry = {
        'sender': sender,
        'message': message,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    }
    conn = sqlite3.connect(get_db_config(), isolation_level=None)
    try:
        conn.execute('BEGIN IMMEDIATE')
        row = conn.execute(
            'SELECT message_threads, status FROM inquiries WHERE id = ?', (inquiry_id,)
        ).fetchone()
        if row is None:
            conn.execute('ROLLBACK')
            return None
        try:
            threads = json.loads(row[0] or '[]')
        except (json.JSONDecodeError, TypeError):
            threads = []
        threads.append(entry)
        status = 'In Progress' if sender == 'admin' and row[1] == 'New' else row[1]
        conn.execute('''
            UPDATE inquiries SET message_threads = ?, status = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (json.dumps(threads, ensure_ascii=False), status, inquiry_id))
        conn.execute('COMMIT')
        return entry
    except Exception:
        if conn.in_transaction:
            conn.execute('ROLLBACK')
        raise
    finally:
        conn.close()
