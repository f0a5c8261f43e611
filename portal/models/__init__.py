"""
SQLAlchemy models. Only the key/value table is stored relationally;
portal entities are JSON records (see portal.schemas).
"""
from portal.models.stored_value import StoredValue

__all__ = [
    "StoredValue",
]
