"""Static-generation planning: page partitions and path enumeration."""

from sitecontent.staticgen.pagination import (
    Page,
    PaginationPlan,
    canonical_locale,
    parse_page_number,
    plan,
    visible_pages,
)
from sitecontent.staticgen.paths import detail_paths, listing_paths, plan_listing

__all__ = [
    "Page",
    "PaginationPlan",
    "canonical_locale",
    "detail_paths",
    "listing_paths",
    "parse_page_number",
    "plan",
    "plan_listing",
    "visible_pages",
]
