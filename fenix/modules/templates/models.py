"""
Templates Models
================

Database schema and CRUD operations for email templates.

'content' (the block list) is the source of truth. 'html_content' is the
compiled projection and is regenerated on every content write; callers
cannot set it directly.
"""

import logging
import sqlite3

from flask import current_app

from fenix.core.database import Database
from .blocks import serialize_blocks, deserialize_blocks
from .renderer import render_email_html, DEFAULT_BRAND

logger = logging.getLogger(__name__)


def _db_log(level, message, details=None):
    """Log to framework's persistent DB logger"""
    try:
        from fenix.core import db_log
        db_log(level, 'templates', message, details)
    except Exception as e:
        logger.debug(f"db_log unavailable: {e}")


def get_db_config():
    """Get the database path from config or environment (3-tier pattern)"""
    return Database.get_db_path('USER_DB', 'users.db')


def get_brand():
    """Brand settings for the compiler from app config"""
    try:
        return {
            'name': current_app.config.get('EMAIL_BRAND_NAME') or DEFAULT_BRAND['name'],
            'tagline': current_app.config.get('EMAIL_BRAND_TAGLINE') or DEFAULT_BRAND['tagline'],
            'website_url': current_app.config.get('EMAIL_WEBSITE_URL') or DEFAULT_BRAND['website_url'],
        }
    except RuntimeError:
        return dict(DEFAULT_BRAND)


def compile_template(blocks, name):
    return render_email_html(blocks, name or 'Newsletter', brand=get_brand())


def init_templates_db():
    """Create the email_templates table in USER_DB"""
    try:
        db_path = get_db_config()
        Database.ensure_dir(db_path)

        with sqlite3.connect(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS email_templates (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    subject TEXT NOT NULL DEFAULT '',
                    content TEXT NOT NULL DEFAULT '[]',
                    html_content TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            conn.commit()
            logger.info("Templates database table created/verified successfully")

    except Exception as e:
        logger.error(f"Error initializing templates database: {e}")
        _db_log('error', 'Failed to init templates DB', {'error': str(e)})
        raise


def _row_to_dict(row):
    d = dict(row)
    d['content'] = deserialize_blocks(d.get('content'))
    return d


def get_template(template_id):
    """Get a single template by ID"""
    if template_id is None:
        return None
    try:
        with sqlite3.connect(get_db_config()) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute('SELECT * FROM email_templates WHERE id = ?', (template_id,))
            row = cursor.fetchone()
            return _row_to_dict(row) if row else None
    except Exception as e:
        logger.error(f"Error getting template {template_id}: {e}")
        _db_log('error', f'Error getting template {template_id}', {'error': str(e)})
        return None


def get_all_templates():
    """Get all templates, newest first"""
    try:
        with sqlite3.connect(get_db_config()) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute('SELECT * FROM email_templates ORDER BY created_at DESC, id DESC')
            return [_row_to_dict(row) for row in cursor.fetchall()]
    except Exception as e:
        logger.error(f"Error getting all templates: {e}")
        _db_log('error', 'Error getting all templates', {'error': str(e)})
        return []


def create_template(data):
    """Create a template and compile its HTML. Returns the new template dict or None."""
    try:
        content = data.get('content') or []
        name = data.get('name', '')
        html_content = compile_template(content, name)

        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO email_templates (name, subject, content, html_content)
                VALUES (?, ?, ?, ?)
            ''', (name, data.get('subject', ''), serialize_blocks(content), html_content))
            template_id = cursor.lastrowid
            conn.commit()

        logger.info(f"Created template {template_id}: {name}")
        return get_template(template_id)

    except Exception as e:
        logger.error(f"Error creating template: {e}")
        _db_log('error', 'Error creating template', {'error': str(e)})
        return None


def update_template(template_id, data):
    """Update name/subject/content. A content write always recompiles html_content."""
    try:
        existing = get_template(template_id)
        if not existing:
            return None

        fields = {}
        if data.get('name'):
            fields['name'] = data['name']
        if data.get('subject'):
            fields['subject'] = data['subject']
        if data.get('content') is not None:
            fields['content'] = serialize_blocks(data['content'])
            fields['html_content'] = compile_template(data['content'], fields.get('name') or existing['name'])
        elif 'name' in fields:
            # Title and preheader come from the name
            fields['html_content'] = compile_template(existing['content'], fields['name'])

        assignments = ', '.join(f'{key} = ?' for key in fields)
        if assignments:
            assignments += ', '
        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f'UPDATE email_templates SET {assignments}updated_at = CURRENT_TIMESTAMP WHERE id = ?',
                (*fields.values(), template_id)
            )
            conn.commit()

        logger.info(f"Updated template {template_id}")
        return get_template(template_id)

    except Exception as e:
        logger.error(f"Error updating template {template_id}: {e}")
        _db_log('error', f'Error updating template {template_id}', {'error': str(e)})
        return None


def delete_template(template_id):
    """Delete a template. Campaigns that used it keep running with template_id = NULL."""
    try:
        with sqlite3.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'campaigns'")
            if cursor.fetchone():
                cursor.execute('UPDATE campaigns SET template_id = NULL WHERE template_id = ?', (template_id,))
            cursor.execute('DELETE FROM email_templates WHERE id = ?', (template_id,))
            deleted = cursor.rowcount
            conn.commit()

        logger.info(f"Deleted template {template_id}")
        return deleted > 0
    except Exception as e:
        logger.error(f"Error deleting template {template_id}: {e}")
        _db_log('error', f'Error deleting template {template_id}', {'error': str(e)})
        return False
