"""
User model.

Owner of collections, leads and audit rows. Authentication lives outside
this service; only the identity is needed here.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from lead_reconciler.models.base_model import TimestampedModel


class User(TimestampedModel):
    """User table - the owning account for every ingested entity."""
    
    __tablename__ = "users"
    
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )
    
    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
