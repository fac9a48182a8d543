from __future__ import annotations
from typing import Any, Dict

from backoffice.core.categories import ALL_CATEGORIES, STATUS_OPTIONS
from backoffice.schemas.filters import default_filter_spec
from backoffice.services.filtering_engine import ClientStatusFilterEngine, default_engine


def get_filter_metadata(engine: ClientStatusFilterEngine | None = None) -> Dict[str, Any]:
    """Returns the filter panel options: categories, statuses and defaults."""
    engine = engine or default_engine

    categories = [{"key": ALL_CATEGORIES, "label": "All"}]
    categories.extend(
        {"key": fields.key, "label": fields.label}
        for fields in engine.categories.values()
    )

    return {
        "categories": categories,
        "statuses": list(STATUS_OPTIONS),
        "default_filters": default_filter_spec().model_dump(by_alias=True),
        "open_ended_membership": engine.open_ended.value,
    }
