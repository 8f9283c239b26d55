"""
Company model.

An organization observed by one or more ingestion sources. Identity fields
(name, domain, website, linkedin_url) are set once at creation.
"""

from typing import List, Optional

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lead_reconciler.models.base_model import JSONType, TimestampedModel


class Company(TimestampedModel):
    """Company table - resolved organizations linked from leads."""
    
    __tablename__ = "companies"
    
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    website: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    
    # Lowercase host without a leading "www."
    domain: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    linkedin_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    
    founded_year: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    
    industry: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    # Free-form band, e.g. "11-50"
    size: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    specialities: Mapped[Optional[List[str]]] = mapped_column(
        JSONType,
        nullable=True,
    )
    
    # e.g. "amazon aws, cloudflare dns, gmail"
    technologies: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    city: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    
    __table_args__ = (
        Index("ix_companies_name", "name"),
        Index("ix_companies_domain", "domain"),
        Index("ix_companies_website", "website"),
        Index("ix_companies_linkedin_url", "linkedin_url"),
    )
