"""
Database Module

This package provides the storage handle and the ORM tables backing the
form and response repositories.
"""

from formbuilder.database.base import Base
from formbuilder.database.init_db import Database
from formbuilder.database.models import FormRecord, ResponseRecord

__all__ = [
    'Base',
    'Database',
    'FormRecord',
    'ResponseRecord',
]
