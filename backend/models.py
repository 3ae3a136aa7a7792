from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; readable from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SiteStatus(str, Enum):
    NEW = "NEW"
    REVIEWING = "REVIEWING"
    UNDER_LOI = "UNDER_LOI"
    UNDER_CONTRACT = "UNDER_CONTRACT"
    PASSED = "PASSED"
    CLOSED = "CLOSED"


class ScenarioType(str, Enum):
    MF_GARDEN_MARKET = "MF_GARDEN_MARKET"
    MF_GARDEN_LIHTC = "MF_GARDEN_LIHTC"
    BTR_DUPLEX = "BTR_DUPLEX"
    BTR_ROW_TOWNHOME = "BTR_ROW_TOWNHOME"


class ScenarioStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class CompType(str, Enum):
    MF = "MF"
    BTR = "BTR"
    SFR = "SFR"
    TOWNHOME = "TOWNHOME"
    OTHER = "OTHER"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


# ---- OM extraction ----

class FieldKind(str, Enum):
    """Expected primitive kind of an extracted field."""
    TEXT = "text"
    NUMBER = "number"


class ExtractedField(ApiModel):
    """Single extracted field with the literal document snippet backing it."""
    value: Optional[Any] = None
    source_snippet: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0, default=0.0)


class SiteExtraction(ApiModel):
    """
    Structured OM extraction. Every field is an ExtractedField; a field the
    model could not find has value None, confidence 0 and no snippet.
    """
    name: ExtractedField = Field(default_factory=ExtractedField)
    address_line1: ExtractedField = Field(default_factory=ExtractedField)
    city: ExtractedField = Field(default_factory=ExtractedField)
    state: ExtractedField = Field(default_factory=ExtractedField)
    zip: ExtractedField = Field(default_factory=ExtractedField)
    size_acres: ExtractedField = Field(default_factory=ExtractedField)
    ask_price_total: ExtractedField = Field(default_factory=ExtractedField)
    broker_name: ExtractedField = Field(default_factory=ExtractedField)
    broker_company: ExtractedField = Field(default_factory=ExtractedField)
    broker_email: ExtractedField = Field(default_factory=ExtractedField)
    listing_url: ExtractedField = Field(default_factory=ExtractedField)
    mud_name: ExtractedField = Field(default_factory=ExtractedField)
    detention_notes: ExtractedField = Field(default_factory=ExtractedField)
    deed_restrictions_text: ExtractedField = Field(default_factory=ExtractedField)


NUMERIC_EXTRACTION_FIELDS = frozenset({"size_acres", "ask_price_total"})


class CompFacts(BaseModel):
    """Facts handed to the comp summary prompt; nothing else may be mentioned."""
    name: str
    type: str
    rent_per_sf: Optional[str] = None
    rent_range: str = "? - ?"
    distance: str = "? miles"
    current_notes: Optional[str] = None


class DealSummary(ApiModel):
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    overview: str = ""


# ---- Enrichment provider results ----

class GeocodeResult(ApiModel):
    lat: float
    lon: float
    source: str
    is_fallback: bool = False


class DemographicData(ApiModel):
    median_household_income: Optional[int] = None
    population: Optional[int] = None
    source: str
    as_of_year: int
    is_fallback: bool = False


class ProgramFlagsData(ApiModel):
    is_qct: bool = False
    is_dda: bool = False
    is_opportunity_zone: bool = False
    source: str
    is_fallback: bool = False


class FloodData(ApiModel):
    flood_zone_code: Optional[str] = None
    flood_source: str
    is_fallback: bool = False


# ---- Site request bodies ----

class SiteConstraintsInput(ApiModel):
    detention_required: Optional[bool] = None
    detention_notes: Optional[str] = None
    can_break_ground_after: Optional[datetime] = None
    zoning_type: Optional[str] = None
    deed_restrictions_text: Optional[str] = None
    flood_zone_code: Optional[str] = None
    flood_source: Optional[str] = None
    school_district_name: Optional[str] = None
    school_district_rating_source: Optional[str] = None
    school_district_rating_value: Optional[str] = None


class SiteUtilitiesInput(ApiModel):
    water_provider: Optional[str] = None
    sewer_provider: Optional[str] = None
    mud_name: Optional[str] = None
    tax_rate_total: Optional[float] = Field(default=None, gt=0)
    tax_rate_source_url: Optional[str] = None
    tax_rate_last_checked_at: Optional[datetime] = None


class SiteCreate(ApiModel):
    name: str = Field(min_length=1)
    address_line1: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip: str = Field(min_length=1)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    county: Optional[str] = None
    ahj: Optional[str] = None
    size_acres: float = Field(gt=0)
    ask_price_total: float = Field(gt=0)
    broker_name: Optional[str] = None
    broker_company: Optional[str] = None
    broker_email: Optional[EmailStr] = None
    listing_url: Optional[str] = None
    status: Optional[SiteStatus] = None
    notes_internal: Optional[str] = None
    constraints: Optional[SiteConstraintsInput] = None
    utilities: Optional[SiteUtilitiesInput] = None


class SiteUpdate(ApiModel):
    """Partial update; only fields present in the request body are applied."""
    name: Optional[str] = Field(default=None, min_length=1)
    address_line1: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1)
    state: Optional[str] = Field(default=None, min_length=1)
    zip: Optional[str] = Field(default=None, min_length=1)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    county: Optional[str] = None
    ahj: Optional[str] = None
    size_acres: Optional[float] = Field(default=None, gt=0)
    ask_price_total: Optional[float] = Field(default=None, gt=0)
    broker_name: Optional[str] = None
    broker_company: Optional[str] = None
    broker_email: Optional[EmailStr] = None
    listing_url: Optional[str] = None
    status: Optional[SiteStatus] = None
    notes_internal: Optional[str] = None
    constraints: Optional[SiteConstraintsInput] = None
    utilities: Optional[SiteUtilitiesInput] = None


class SiteQuery(BaseModel):
    status: Optional[SiteStatus] = None
    state: Optional[str] = None
    city: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: SortOrder = SortOrder.DESC
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class ScenarioUpdate(ApiModel):
    assumed_net_acres: Optional[float] = Field(default=None, ge=0)
    assumed_units: Optional[int] = Field(default=None, ge=0)
    status: Optional[ScenarioStatus] = None


class RentCompCreate(ApiModel):
    comp_name: str = Field(min_length=1)
    comp_type: CompType
    average_rent_psf: Optional[float] = Field(default=None, ge=0)
    rent_range_low: Optional[float] = Field(default=None, ge=0)
    rent_range_high: Optional[float] = Field(default=None, ge=0)
    distance_miles: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None
    url: Optional[str] = None


class RentCompUpdate(ApiModel):
    comp_name: Optional[str] = Field(default=None, min_length=1)
    comp_type: Optional[CompType] = None
    average_rent_psf: Optional[float] = Field(default=None, ge=0)
    rent_range_low: Optional[float] = Field(default=None, ge=0)
    rent_range_high: Optional[float] = Field(default=None, ge=0)
    distance_miles: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None
    url: Optional[str] = None


# ---- Responses (read from ORM rows) ----

class SiteConstraintsOut(SiteConstraintsInput):
    id: str


class SiteUtilitiesOut(SiteUtilitiesInput):
    id: str


class DemographicsOut(ApiModel):
    id: str
    radius_miles: float
    median_household_income: Optional[int] = None
    population: Optional[int] = None
    source: Optional[str] = None
    as_of_year: Optional[int] = None
    is_fallback: bool = False


class ProgramFlagsOut(ApiModel):
    id: str
    in_lihtc_qct: bool = False
    in_lihtc_dda: bool = False
    in_opportunity_zone: bool = False
    oz_tract_id: Optional[str] = None
    source: Optional[str] = None
    is_fallback: bool = False
    program_flags_last_checked_at: Optional[datetime] = None


class RentCompOut(ApiModel):
    id: str
    site_id: str
    comp_name: str
    comp_type: CompType
    average_rent_psf: Optional[float] = None
    rent_range_low: Optional[float] = None
    rent_range_high: Optional[float] = None
    distance_miles: Optional[float] = None
    notes: Optional[str] = None
    url: Optional[str] = None
    created_at: Optional[datetime] = None


class ScenarioOut(ApiModel):
    id: str
    site_id: str
    scenario_type: ScenarioType
    assumed_net_acres: float
    assumed_units: int
    density_units_per_acre: float
    land_price_per_door: float
    status: ScenarioStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SiteListItem(ApiModel):
    id: str
    name: str
    city: str
    state: str
    status: SiteStatus
    size_acres: float
    ask_price_total: float
    ask_price_per_sf: float
    created_at: Optional[datetime] = None


class SitePage(ApiModel):
    data: List[SiteListItem]
    total: int
    page: int
    limit: int
    total_pages: int


class SiteOut(ApiModel):
    id: str
    name: str
    address_line1: str
    city: str
    state: str
    zip: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    county: Optional[str] = None
    ahj: Optional[str] = None
    size_acres: float
    size_sf: float
    ask_price_total: float
    ask_price_per_sf: float
    broker_name: Optional[str] = None
    broker_company: Optional[str] = None
    broker_email: Optional[str] = None
    listing_url: Optional[str] = None
    status: SiteStatus
    notes_internal: Optional[str] = None
    geocode_source: Optional[str] = None
    geocode_is_fallback: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    constraints: Optional[SiteConstraintsOut] = None
    utilities: Optional[SiteUtilitiesOut] = None


class EnrichedSiteOut(SiteOut):
    demographics: List[DemographicsOut] = Field(default_factory=list)
    program_flags: Optional[ProgramFlagsOut] = None
