from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime

from app.db.base import Base


class CartStorageSlot(Base):
    """Single key/value row holding the serialized cart."""
    __tablename__ = "cart_storage"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
