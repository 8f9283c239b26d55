"""
Collection and LeadCollection models.

A collection is a user-defined group of leads. Leads join collections
through lead_collections (many-to-many).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from lead_reconciler.db.base import Base
from lead_reconciler.models.base_model import TimestampedModel


class Collection(TimestampedModel):
    """Collection table - resolution scope for leads."""
    
    __tablename__ = "collections"
    
    owner_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )


class LeadCollection(Base):
    """
    LeadCollection table - membership of a lead in a collection.
    
    The (lead_id, collection_id) pair is unique; linking twice is a no-op.
    """
    
    __tablename__ = "lead_collections"
    
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    
    lead_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
    )
    
    collection_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    
    __table_args__ = (
        UniqueConstraint("lead_id", "collection_id", name="uq_lead_collections_lead_collection"),
    )
