"""
Company resolution: find an existing company for an organization fragment
or create one.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from lead_reconciler.repositories.company_repository import CompanyRepository
from lead_reconciler.schemas.fragments import CompanyFragment
from lead_reconciler.utils.normalize import extract_domain, normalize_text

logger = logging.getLogger(__name__)


def website_variants(domain: str) -> List[str]:
    """Common spellings of a website stored for ``domain``."""
    return [
        domain,
        f"http://{domain}",
        f"https://{domain}",
        f"http://www.{domain}",
        f"https://www.{domain}",
    ]


def domain_stem(domain: str) -> str:
    """``acme.co.uk`` -> ``acme``."""
    return domain.split(".")[0]


class CompanyResolverService:
    """Resolve-before-create for companies. Emits at most one insert per call."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = CompanyRepository(db)

    async def resolve_or_create(self, fragment: CompanyFragment) -> Optional[int]:
        """
        Return the id of the matching company, creating it when none matches.

        Returns None when the fragment has no usable name. Lookup ORs name,
        normalized domain, website and LinkedIn URL, each only when present.
        """
        if not fragment.has_name:
            return None

        name = fragment.name.strip()
        domain = extract_domain(fragment.domain) if fragment.domain else None
        if not domain and fragment.website:
            domain = extract_domain(fragment.website)

        existing = await self.repo.find_matching(
            name=name,
            domain=domain,
            website=normalize_text(fragment.website),
            linkedin_url=normalize_text(fragment.linkedin_url),
        )
        if existing:
            return existing.id

        values = fragment.column_values()
        values["name"] = name
        values.pop("domain", None)
        if domain:
            values["domain"] = domain
        company = await self.repo.create(values)
        logger.info("Created company %s (%r, domain=%s)", company.id, name, domain)
        return company.id

    async def resolve_by_domain(self, raw_domain: Optional[str]) -> Optional[int]:
        """
        Resolve a company from a bare domain (email discovery results).

        Tries the normalized domain and website spellings, then the domain
        stem as a case-insensitive name, then creates a company named after the stem.
        """
        domain = extract_domain(raw_domain)
        if not domain:
            return None

        websites = website_variants(domain)
        raw_text = normalize_text(raw_domain)
        if raw_text and raw_text not in websites:
            websites.append(raw_text)

        existing = await self.repo.find_by_domain_or_websites(domain, websites)
        if existing:
            return existing.id

        stem = domain_stem(domain)
        if stem:
            by_name = await self.repo.find_by_name_insensitive(stem)
            if by_name:
                return by_name.id

        name = stem[:1].upper() + stem[1:] if stem else domain
        company = await self.repo.create(
            {"name": name, "domain": domain, "website": f"https://{domain}"}
        )
        logger.info("Created company %s from domain %s", company.id, domain)
        return company.id
