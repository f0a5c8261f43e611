"""Key/value rows behind the storage port."""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from portal.database import Base


class StoredValue(Base):
    __tablename__ = "stored_values"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)  # JSON-encoded overlay envelope or session record

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
