"""Initial schema: users, companies, collections, leads, memberships, usage audit

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("website", sa.String(length=500), nullable=True),
        sa.Column("domain", sa.String(length=255), nullable=True),
        sa.Column("linkedin_url", sa.String(length=500), nullable=True),
        sa.Column("founded_year", sa.Integer(), nullable=True),
        sa.Column("industry", sa.String(length=255), nullable=True),
        sa.Column("size", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("specialities", JSON_TYPE, nullable=True),
        sa.Column("technologies", sa.Text(), nullable=True),
        sa.Column("city", sa.String(length=255), nullable=True),
        sa.Column("state", sa.String(length=255), nullable=True),
        sa.Column("country", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_companies_name", "companies", ["name"])
    op.create_index("ix_companies_domain", "companies", ["domain"])
    op.create_index("ix_companies_website", "companies", ["website"])
    op.create_index("ix_companies_linkedin_url", "companies", ["linkedin_url"])

    op.create_table(
        "collections",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("owner_user_id", sa.Integer(), sa.ForeignKey("users.id", name="fk_collections_owner_user_id_users", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_collections_owner_user_id", "collections", ["owner_user_id"])

    op.create_table(
        "leads",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("owner_user_id", sa.Integer(), sa.ForeignKey("users.id", name="fk_leads_owner_user_id_users", ondelete="CASCADE"), nullable=False),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", name="fk_leads_company_id_companies", ondelete="SET NULL"), nullable=True),
        sa.Column("source_scraper_id", sa.Integer(), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("linkedin_url", sa.String(length=500), nullable=True),
        sa.Column("personal_email", sa.String(length=320), nullable=True),
        sa.Column("external_person_id", sa.String(length=255), nullable=True),
        sa.Column("public_identifier", sa.String(length=255), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("position", sa.String(length=500), nullable=True),
        sa.Column("headline", sa.Text(), nullable=True),
        sa.Column("about", sa.Text(), nullable=True),
        sa.Column("seniority", sa.String(length=100), nullable=True),
        sa.Column("functional_area", sa.String(length=255), nullable=True),
        sa.Column("object_urn", sa.String(length=255), nullable=True),
        sa.Column("profile_picture", sa.Text(), nullable=True),
        sa.Column("connections_count", sa.Integer(), nullable=True),
        sa.Column("follower_count", sa.Integer(), nullable=True),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("open_to_work", sa.Boolean(), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=True),
        sa.Column("current_position", JSON_TYPE, nullable=True),
        sa.Column("experience", JSON_TYPE, nullable=True),
        sa.Column("education", JSON_TYPE, nullable=True),
        sa.Column("top_skills", JSON_TYPE, nullable=True),
        sa.Column("phone_numbers", JSON_TYPE, nullable=True),
        sa.Column("city", sa.String(length=255), nullable=True),
        sa.Column("state", sa.String(length=255), nullable=True),
        sa.Column("country", sa.String(length=255), nullable=True),
        sa.Column("email_certainty", sa.String(length=50), nullable=True),
        sa.Column("email_verification_status", sa.String(length=50), nullable=True),
        sa.Column("email_verification_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=100), nullable=True),
        sa.Column("validated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("extra", JSON_TYPE, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_leads_owner_user_id", "leads", ["owner_user_id"])
    op.create_index("ix_leads_company_id", "leads", ["company_id"])
    op.create_index("ix_leads_owner_email", "leads", ["owner_user_id", "email"])
    op.create_index("ix_leads_owner_linkedin_url", "leads", ["owner_user_id", "linkedin_url"])
    op.create_index("ix_leads_owner_public_identifier", "leads", ["owner_user_id", "public_identifier"])
    op.create_index("ix_leads_owner_name", "leads", ["owner_user_id", "first_name", "last_name"])

    op.create_table(
        "lead_collections",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lead_id", sa.Integer(), sa.ForeignKey("leads.id", name="fk_lead_collections_lead_id_leads", ondelete="CASCADE"), nullable=False),
        sa.Column("collection_id", sa.Integer(), sa.ForeignKey("collections.id", name="fk_lead_collections_collection_id_collections", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("lead_id", "collection_id", name="uq_lead_collections_lead_collection"),
    )
    op.create_index("ix_lead_collections_collection_id", "lead_collections", ["collection_id"])

    op.create_table(
        "entity_scraper_usages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("entity_type", sa.String(length=20), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("scraper_id", sa.Integer(), nullable=True),
        sa.Column("source_job_id", sa.String(length=255), nullable=True),
        sa.Column("source_tag", sa.String(length=100), nullable=False),
        sa.Column("succeeded", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("item_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("config_snapshot", JSON_TYPE, nullable=True),
        sa.Column("owner_user_id", sa.Integer(), sa.ForeignKey("users.id", name="fk_entity_scraper_usages_owner_user_id_users", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_entity_scraper_usages_entity", "entity_scraper_usages", ["entity_type", "entity_id"])
    op.create_index("ix_entity_scraper_usages_owner", "entity_scraper_usages", ["owner_user_id"])


def downgrade() -> None:
    op.drop_index("ix_entity_scraper_usages_owner", table_name="entity_scraper_usages")
    op.drop_index("ix_entity_scraper_usages_entity", table_name="entity_scraper_usages")
    op.drop_table("entity_scraper_usages")

    op.drop_index("ix_lead_collections_collection_id", table_name="lead_collections")
    op.drop_table("lead_collections")

    for index_name in (
        "ix_leads_owner_name",
        "ix_leads_owner_public_identifier",
        "ix_leads_owner_linkedin_url",
        "ix_leads_owner_email",
        "ix_leads_company_id",
        "ix_leads_owner_user_id",
    ):
        op.drop_index(index_name, table_name="leads")
    op.drop_table("leads")

    op.drop_index("ix_collections_owner_user_id", table_name="collections")
    op.drop_table("collections")

    for index_name in (
        "ix_companies_linkedin_url",
        "ix_companies_website",
        "ix_companies_domain",
        "ix_companies_name",
    ):
        op.drop_index(index_name, table_name="companies")
    op.drop_table("companies")

    op.drop_table("users")
