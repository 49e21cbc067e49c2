"""
Centralized logging service for the Fenix framework.
Provides structured logging with database storage so operators can review
send failures and workflow errors after the fact.
"""

import json
import logging
import sqlite3
from datetime import datetime, timedelta

from flask import request, has_request_context

from .database import Database

logger = logging.getLogger('fenix')


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _db_path():
        return Database.get_db_path('ANALYTICS_DB', 'analytics_log.db')

    @staticmethod
    def _ensure_logs_table():
        """Ensure the app_logs table exists"""
        try:
            db_path = LoggingService._db_path()
            Database.ensure_dir(db_path)
            with Database.connect(db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS app_logs (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        timestamp TEXT NOT NULL,
                        level TEXT NOT NULL,
                        source TEXT NOT NULL,
                        message TEXT NOT NULL,
                        details TEXT,
                        ip_address TEXT,
                        request_path TEXT,
                        user_id TEXT
                    )
                """)
                cursor.execute("""
                    CREATE INDEX IF NOT EXISTS idx_logs_timestamp
                    ON app_logs(timestamp DESC)
                """)
                cursor.execute("""
                    CREATE INDEX IF NOT EXISTS idx_logs_source
                    ON app_logs(source)
                """)
                conn.commit()
        except Exception as e:
            logger.warning(f"Failed to ensure logs table: {e}")

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None

        try:
            ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
            if ip_address and ',' in ip_address:
                ip_address = ip_address.split(',')[0].strip()
            return ip_address, request.path
        except Exception:
            return None, None

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (campaigns, templates, inquiries, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        try:
            LoggingService._ensure_logs_table()

            ip_address, request_path = LoggingService._get_request_context()

            if isinstance(details, (dict, list)):
                details = json.dumps(details, indent=2, default=str)

            timestamp = datetime.now().isoformat()

            with Database.connect(LoggingService._db_path()) as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, request_path, user_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    timestamp, level.upper(), source, message, details,
                    ip_address, request_path, user_id
                ))
                conn.commit()

        except Exception as e:
            # Fallback to the stdout logger if the database fails
            logger.log(getattr(logging, level.upper(), logging.INFO), f"[{source}] {message}")
            logger.warning(f"Logging service error: {e}")

    @staticmethod
    def info(source, message, details=None, user_id=None):
        """Log info message"""
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        """Log warning message"""
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        """Log error message"""
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def get_logs(source=None, level=None, limit=100):
        """Return the most recent log entries, newest first"""
        try:
            query = "SELECT * FROM app_logs"
            clauses, params = [], []
            if source:
                clauses.append("source = ?")
                params.append(source)
            if level:
                clauses.append("level = ?")
                params.append(level.upper())
            if clauses:
                query += " WHERE " + " AND ".join(clauses)
            query += " ORDER BY id DESC LIMIT ?"
            params.append(limit)

            with Database.connect(LoggingService._db_path()) as conn:
                conn.row_factory = sqlite3.Row
                cursor = conn.cursor()
                cursor.execute(query, params)
                return [dict(row) for row in cursor.fetchall()]
        except Exception as e:
            logger.error(f"Failed to read logs: {e}")
            return []

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        try:
            cutoff_iso = (datetime.now() - timedelta(days=days_to_keep)).isoformat()

            with Database.connect(LoggingService._db_path()) as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM app_logs WHERE timestamp < ?", (cutoff_iso,))
                deleted_count = cursor.rowcount
                conn.commit()

            LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
            return deleted_count

        except Exception as e:
            LoggingService.error('system', f"Failed to cleanup old logs: {e}")
            return 0


def db_log(level, source, message, details=None):
    """Shorthand used by modules: LoggingService.log with a level string"""
    LoggingService.log(level, source, message, details)
