"""SQLAlchemy models for sites and their enrichment, comps and scenarios. Use Alembic for migrations."""
from __future__ import annotations

from datetime import datetime
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from models import ScenarioStatus, SiteStatus

from .session import Base


class Site(Base):
    __tablename__ = "sites"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    address_line1 = Column("address_line1", String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    zip = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    county = Column(String, nullable=True)
    ahj = Column(String, nullable=True)
    size_acres = Column("size_acres", Float, nullable=False)
    size_sf = Column("size_sf", Float, nullable=False)
    ask_price_total = Column("ask_price_total", Float, nullable=False)
    ask_price_per_sf = Column("ask_price_per_sf", Float, nullable=False)
    broker_name = Column("broker_name", String, nullable=True)
    broker_company = Column("broker_company", String, nullable=True)
    broker_email = Column("broker_email", String, nullable=True)
    listing_url = Column("listing_url", String, nullable=True)
    status = Column(String, nullable=False, default=SiteStatus.NEW.value)
    notes_internal = Column("notes_internal", Text, nullable=True)
    geocode_source = Column("geocode_source", String, nullable=True)
    geocode_is_fallback = Column("geocode_is_fallback", Boolean, nullable=True)
    created_at = Column("created_at", DateTime, default=datetime.utcnow)
    updated_at = Column("updated_at", DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    constraints = relationship(
        "SiteConstraints", back_populates="site", uselist=False, cascade="all, delete-orphan"
    )
    utilities = relationship(
        "SiteUtilities", back_populates="site", uselist=False, cascade="all, delete-orphan"
    )
    program_flags = relationship(
        "ProgramFlags", back_populates="site", uselist=False, cascade="all, delete-orphan"
    )
    demographics = relationship(
        "Demographics",
        back_populates="site",
        cascade="all, delete-orphan",
        order_by="Demographics.radius_miles",
    )
    rent_comps = relationship("RentComp", back_populates="site", cascade="all, delete-orphan")
    scenarios = relationship(
        "Scenario",
        back_populates="site",
        cascade="all, delete-orphan",
        order_by="Scenario.scenario_type",
    )


class SiteConstraints(Base):
    __tablename__ = "site_constraints"

    id = Column(String, primary_key=True)
    site_id = Column("site_id", String, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, unique=True)
    detention_required = Column("detention_required", Boolean, nullable=True)
    detention_notes = Column("detention_notes", Text, nullable=True)
    can_break_ground_after = Column("can_break_ground_after", DateTime, nullable=True)
    zoning_type = Column("zoning_type", String, nullable=True)
    deed_restrictions_text = Column("deed_restrictions_text", Text, nullable=True)
    # Flood zone is entered by a reviewer; enrichment never writes these two.
    flood_zone_code = Column("flood_zone_code", String, nullable=True)
    flood_source = Column("flood_source", String, nullable=True)
    school_district_name = Column("school_district_name", String, nullable=True)
    school_district_rating_source = Column("school_district_rating_source", String, nullable=True)
    school_district_rating_value = Column("school_district_rating_value", String, nullable=True)

    site = relationship("Site", back_populates="constraints")


class SiteUtilities(Base):
    __tablename__ = "site_utilities"

    id = Column(String, primary_key=True)
    site_id = Column("site_id", String, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, unique=True)
    water_provider = Column("water_provider", String, nullable=True)
    sewer_provider = Column("sewer_provider", String, nullable=True)
    mud_name = Column("mud_name", String, nullable=True)
    tax_rate_total = Column("tax_rate_total", Float, nullable=True)
    tax_rate_source_url = Column("tax_rate_source_url", String, nullable=True)
    tax_rate_last_checked_at = Column("tax_rate_last_checked_at", DateTime, nullable=True)

    site = relationship("Site", back_populates="utilities")


class Demographics(Base):
    __tablename__ = "demographics"
    __table_args__ = (UniqueConstraint("site_id", "radius_miles", name="uq_demographics_site_radius"),)

    id = Column(String, primary_key=True)
    site_id = Column("site_id", String, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    radius_miles = Column("radius_miles", Float, nullable=False)
    median_household_income = Column("median_household_income", Integer, nullable=True)
    population = Column(Integer, nullable=True)
    source = Column(String, nullable=True)
    as_of_year = Column("as_of_year", Integer, nullable=True)
    is_fallback = Column("is_fallback", Boolean, nullable=False, default=False)
    created_at = Column("created_at", DateTime, default=datetime.utcnow)
    updated_at = Column("updated_at", DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    site = relationship("Site", back_populates="demographics")


class ProgramFlags(Base):
    __tablename__ = "program_flags"

    id = Column(String, primary_key=True)
    site_id = Column("site_id", String, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, unique=True)
    in_lihtc_qct = Column("in_lihtc_qct", Boolean, nullable=False, default=False)
    in_lihtc_dda = Column("in_lihtc_dda", Boolean, nullable=False, default=False)
    in_opportunity_zone = Column("in_opportunity_zone", Boolean, nullable=False, default=False)
    oz_tract_id = Column("oz_tract_id", String, nullable=True)
    source = Column(String, nullable=True)
    is_fallback = Column("is_fallback", Boolean, nullable=False, default=False)
    program_flags_last_checked_at = Column("program_flags_last_checked_at", DateTime, nullable=True)

    site = relationship("Site", back_populates="program_flags")


class RentComp(Base):
    __tablename__ = "rent_comps"

    id = Column(String, primary_key=True)
    site_id = Column("site_id", String, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    comp_name = Column("comp_name", String, nullable=False)
    comp_type = Column("comp_type", String, nullable=False)
    average_rent_psf = Column("average_rent_psf", Float, nullable=True)
    rent_range_low = Column("rent_range_low", Float, nullable=True)
    rent_range_high = Column("rent_range_high", Float, nullable=True)
    distance_miles = Column("distance_miles", Float, nullable=True)
    notes = Column(Text, nullable=True)
    url = Column(String, nullable=True)
    created_at = Column("created_at", DateTime, default=datetime.utcnow)
    updated_at = Column("updated_at", DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    site = relationship("Site", back_populates="rent_comps")


class Scenario(Base):
    __tablename__ = "scenarios"

    id = Column(String, primary_key=True)
    site_id = Column("site_id", String, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    scenario_type = Column("scenario_type", String, nullable=False)
    assumed_net_acres = Column("assumed_net_acres", Float, nullable=False)
    assumed_units = Column("assumed_units", Integer, nullable=False)
    density_units_per_acre = Column("density_units_per_acre", Float, nullable=False)
    land_price_per_door = Column("land_price_per_door", Float, nullable=False)
    status = Column(String, nullable=False, default=ScenarioStatus.TODO.value)
    created_at = Column("created_at", DateTime, default=datetime.utcnow)
    updated_at = Column("updated_at", DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    site = relationship("Site", back_populates="scenarios")
