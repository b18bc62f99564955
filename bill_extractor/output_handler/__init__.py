"""
Output Handler Module for the Bill Extractor.

Provides storage of reviewed bill records in SQLite.
"""

from .database_handler import DatabaseHandler

__all__ = ['DatabaseHandler']
