"""Site intake services: one module per resource, routes stay thin."""

from services.intake import parse_document
from services.rent_comps import (
    create_rent_comp,
    delete_rent_comp,
    list_rent_comps,
    summarize_comp,
    update_rent_comp,
)
from services.scenarios import (
    create_default_scenarios,
    delete_scenario,
    get_scenario,
    list_scenarios,
    update_scenario,
)
from services.sites import (
    build_site_snapshot,
    create_site,
    delete_site,
    get_site,
    list_sites,
    summarize_site,
    update_site,
)

__all__ = [
    "parse_document",
    "create_rent_comp",
    "delete_rent_comp",
    "list_rent_comps",
    "summarize_comp",
    "update_rent_comp",
    "create_default_scenarios",
    "delete_scenario",
    "get_scenario",
    "list_scenarios",
    "update_scenario",
    "build_site_snapshot",
    "create_site",
    "delete_site",
    "get_site",
    "list_sites",
    "summarize_site",
    "update_site",
]
