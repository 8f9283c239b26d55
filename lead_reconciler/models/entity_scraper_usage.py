"""
EntityScraperUsage model.

Append-only audit of which source/job touched which lead or company.
Never read by resolution; consumed by analytics and billing reports.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from lead_reconciler.db.base import Base
from lead_reconciler.models.base_model import JSONType


class EntityScraperUsage(Base):
    """EntityScraperUsage table - one row per (entity, job) touch."""
    
    __tablename__ = "entity_scraper_usages"
    
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    
    # "lead" | "company"
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    
    scraper_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    source_job_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    source_tag: Mapped[str] = mapped_column(String(100), nullable=False)
    
    succeeded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    item_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    config_snapshot: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    
    owner_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    
    __table_args__ = (
        Index("ix_entity_scraper_usages_entity", "entity_type", "entity_id"),
        Index("ix_entity_scraper_usages_owner", "owner_user_id"),
    )
