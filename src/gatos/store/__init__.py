"""File-backed storage for cat records.

Layout:
    records.py   # Record dataclass + field validation
    codec.py     # Record <-> CSV row, header contract
    locks.py     # shared/exclusive lock around the table file
    table.py     # RecordStore: id allocation + CRUD
"""

from gatos.store.records import FIELDS, Record, validate_fields
from gatos.store.table import RecordStore

__all__ = ["FIELDS", "Record", "RecordStore", "validate_fields"]
