from __future__ import annotations

from typing import Dict, Iterable, Optional

from backoffice.core.categories import ALL_CATEGORIES, STATUS_ACTIVE
from backoffice.schemas.filters import FilterSpec, StatusCounts
from backoffice.services.filtering_engine import (
    ClientStatusFilterEngine,
    CompanyRecord,
    Instant,
    default_engine,
    matches_search,
    reference_date,
)


def count_by_category(
    records: Iterable[CompanyRecord],
    search_term: str = "",
    now: Optional[Instant] = None,
    engine: Optional[ClientStatusFilterEngine] = None,
) -> Dict[str, StatusCounts]:
    """
    Badge counts for the category filter panel.

    For each category: members ('all') split into active and inactive.
    The 'all' row counts every record matching the search, with 'active'
    meaning active in at least one category.
    """
    engine = engine or default_engine
    today = reference_date(now)

    counts: Dict[str, StatusCounts] = {ALL_CATEGORIES: StatusCounts()}
    for key in engine.categories:
        counts[key] = StatusCounts()

    for record in records:
        if not matches_search(record, search_term):
            continue
        overall = counts[ALL_CATEGORIES]
        overall.all += 1

        any_active = False
        for key in engine.member_categories(record):
            row = counts[key]
            row.all += 1
            if engine.resolve_category_status(record, key, today) == STATUS_ACTIVE:
                row.active += 1
                any_active = True
            else:
                row.inactive += 1

        if any_active:
            overall.active += 1
        else:
            overall.inactive += 1

    return counts


def count_matches(
    records: Iterable[CompanyRecord],
    spec: FilterSpec,
    search_term: str = "",
    now: Optional[Instant] = None,
    engine: Optional[ClientStatusFilterEngine] = None,
) -> int:
    engine = engine or default_engine
    return len(engine.filter_companies(records, spec, search_term, now))
