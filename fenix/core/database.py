import json
import os
import sqlite3

from flask import current_app

from .config import Config


class Database:

    @staticmethod
    def connect(path):
        return sqlite3.connect(path)

    @staticmethod
    def get_db_path(key='USER_DB', default='users.db'):
        """Resolve a database path: app.config -> Config -> environment"""
        try:
            val = current_app.config.get(key)
            if val:
                return val
        except RuntimeError:
            pass
        return getattr(Config, key, None) or os.getenv(key, default)

    @staticmethod
    def ensure_dir(db_path):
        """Create the parent directory of a database file if needed"""
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    @staticmethod
    def row_to_dict(row, json_fields=()):
        """Convert a sqlite3.Row to a dict, decoding the given JSON columns"""
        d = dict(row)
        for field in json_fields:
            if field in d and isinstance(d[field], str):
                try:
                    d[field] = json.loads(d[field])
                except (json.JSONDecodeError, TypeError):
                    d[field] = []
        return d
