"""
Lead model.

A person tracked by a user. Leads are created on first observation and
afterwards only enriched through the merge policy, never blind-overwritten.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lead_reconciler.models.base_model import JSONType, TimestampedModel


class Lead(TimestampedModel):
    """Lead table - a person record owned by one user."""
    
    __tablename__ = "leads"
    
    owner_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    # A lead may exist without a resolved company
    company_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    
    source_scraper_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    
    # Identity keys
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    personal_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    external_person_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    public_identifier: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    
    # Descriptive fields
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    position: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    headline: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    about: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    seniority: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    functional_area: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    
    # Profile details (company-employee source)
    object_urn: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    profile_picture: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    connections_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    follower_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    registered_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    open_to_work: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    verified: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    current_position: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSONType, nullable=True)
    experience: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSONType, nullable=True)
    education: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSONType, nullable=True)
    top_skills: Mapped[Optional[List[str]]] = mapped_column(JSONType, nullable=True)
    
    # Contact / location
    phone_numbers: Mapped[Optional[List[str]]] = mapped_column(JSONType, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    
    # Email confidence and verification
    email_certainty: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email_verification_status: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email_verification_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    
    # Marketing fields (CSV imports)
    status: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    validated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    
    # Unrecognized upstream keys kept for forward compatibility
    extra: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    
    __table_args__ = (
        Index("ix_leads_owner_email", "owner_user_id", "email"),
        Index("ix_leads_owner_linkedin_url", "owner_user_id", "linkedin_url"),
        Index("ix_leads_owner_public_identifier", "owner_user_id", "public_identifier"),
        Index("ix_leads_owner_name", "owner_user_id", "first_name", "last_name"),
    )
