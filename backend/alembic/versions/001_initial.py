"""Initial schema: sites, site_constraints, site_utilities, demographics, program_flags, rent_comps, scenarios

Revision ID: 001
Revises:
Create Date: 2026-10-01 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sites",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("address_line1", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("state", sa.String(), nullable=False),
        sa.Column("zip", sa.String(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("county", sa.String(), nullable=True),
        sa.Column("ahj", sa.String(), nullable=True),
        sa.Column("size_acres", sa.Float(), nullable=False),
        sa.Column("size_sf", sa.Float(), nullable=False),
        sa.Column("ask_price_total", sa.Float(), nullable=False),
        sa.Column("ask_price_per_sf", sa.Float(), nullable=False),
        sa.Column("broker_name", sa.String(), nullable=True),
        sa.Column("broker_company", sa.String(), nullable=True),
        sa.Column("broker_email", sa.String(), nullable=True),
        sa.Column("listing_url", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="NEW"),
        sa.Column("notes_internal", sa.Text(), nullable=True),
        sa.Column("geocode_source", sa.String(), nullable=True),
        sa.Column("geocode_is_fallback", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sites_status", "sites", ["status"])
    op.create_index("ix_sites_state_city", "sites", ["state", "city"])

    op.create_table(
        "site_constraints",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("site_id", sa.String(), nullable=False),
        sa.Column("detention_required", sa.Boolean(), nullable=True),
        sa.Column("detention_notes", sa.Text(), nullable=True),
        sa.Column("can_break_ground_after", sa.DateTime(), nullable=True),
        sa.Column("zoning_type", sa.String(), nullable=True),
        sa.Column("deed_restrictions_text", sa.Text(), nullable=True),
        sa.Column("flood_zone_code", sa.String(), nullable=True),
        sa.Column("flood_source", sa.String(), nullable=True),
        sa.Column("school_district_name", sa.String(), nullable=True),
        sa.Column("school_district_rating_source", sa.String(), nullable=True),
        sa.Column("school_district_rating_value", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("site_id"),
    )

    op.create_table(
        "site_utilities",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("site_id", sa.String(), nullable=False),
        sa.Column("water_provider", sa.String(), nullable=True),
        sa.Column("sewer_provider", sa.String(), nullable=True),
        sa.Column("mud_name", sa.String(), nullable=True),
        sa.Column("tax_rate_total", sa.Float(), nullable=True),
        sa.Column("tax_rate_source_url", sa.String(), nullable=True),
        sa.Column("tax_rate_last_checked_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("site_id"),
    )

    op.create_table(
        "demographics",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("site_id", sa.String(), nullable=False),
        sa.Column("radius_miles", sa.Float(), nullable=False),
        sa.Column("median_household_income", sa.Integer(), nullable=True),
        sa.Column("population", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(), nullable=True),
        sa.Column("as_of_year", sa.Integer(), nullable=True),
        sa.Column("is_fallback", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("site_id", "radius_miles", name="uq_demographics_site_radius"),
    )

    op.create_table(
        "program_flags",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("site_id", sa.String(), nullable=False),
        sa.Column("in_lihtc_qct", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("in_lihtc_dda", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("in_opportunity_zone", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("oz_tract_id", sa.String(), nullable=True),
        sa.Column("source", sa.String(), nullable=True),
        sa.Column("is_fallback", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("program_flags_last_checked_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("site_id"),
    )

    op.create_table(
        "rent_comps",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("site_id", sa.String(), nullable=False),
        sa.Column("comp_name", sa.String(), nullable=False),
        sa.Column("comp_type", sa.String(), nullable=False),
        sa.Column("average_rent_psf", sa.Float(), nullable=True),
        sa.Column("rent_range_low", sa.Float(), nullable=True),
        sa.Column("rent_range_high", sa.Float(), nullable=True),
        sa.Column("distance_miles", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rent_comps_site_id", "rent_comps", ["site_id"])

    op.create_table(
        "scenarios",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("site_id", sa.String(), nullable=False),
        sa.Column("scenario_type", sa.String(), nullable=False),
        sa.Column("assumed_net_acres", sa.Float(), nullable=False),
        sa.Column("assumed_units", sa.Integer(), nullable=False),
        sa.Column("density_units_per_acre", sa.Float(), nullable=False),
        sa.Column("land_price_per_door", sa.Float(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="TODO"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["site_id"], ["sites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_scenarios_site_id", "scenarios", ["site_id"])


def downgrade() -> None:
    op.drop_table("scenarios")
    op.drop_table("rent_comps")
    op.drop_table("program_flags")
    op.drop_table("demographics")
    op.drop_table("site_utilities")
    op.drop_table("site_constraints")
    op.drop_table("sites")
