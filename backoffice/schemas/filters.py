from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backoffice.core.categories import ALL_CATEGORIES, STATUS_ACTIVE


def _as_flags(value: Any) -> Any:
    # Accept either {"acc": True} flag maps or plain collections of keys.
    if value is None:
        return {}
    if isinstance(value, (list, tuple, set, frozenset)):
        return {str(key).strip().lower(): True for key in value}
    if isinstance(value, dict):
        return {str(key).strip().lower(): flag for key, flag in value.items()}
    return value


class FilterSpec(BaseModel):
    """
    Snapshot of the category/status filter chosen in a dashboard.

    The UI owns this value between calls; the engine only reads it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    categories: Dict[str, bool] = Field(
        default_factory=dict,
        description="Selected service categories, e.g. {'acc': True}. 'all' lifts the restriction.",
    )
    status_by_category: Dict[str, Dict[str, bool]] = Field(
        default_factory=dict,
        alias="statusByCategory",
        description="Per-category status flags, e.g. {'acc': {'active': True}}.",
    )

    @field_validator("categories", mode="before")
    @classmethod
    def coerce_categories(cls, v: Any) -> Any:
        return _as_flags(v)

    @field_validator("status_by_category", mode="before")
    @classmethod
    def coerce_statuses(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {
                str(category).strip().lower(): _as_flags(statuses)
                for category, statuses in v.items()
            }
        return v

    def all_categories_selected(self) -> bool:
        return bool(self.categories.get(ALL_CATEGORIES))

    def selected_categories(self, known: Optional[Iterable[str]] = None) -> List[str]:
        """Selected category keys in selection order, sentinel removed."""
        keys = [
            key
            for key, flag in self.categories.items()
            if flag and key != ALL_CATEGORIES
        ]
        if known is not None:
            known_keys = set(known)
            keys = [key for key in keys if key in known_keys]
        return keys

    def selected_statuses(self, category: str) -> FrozenSet[str]:
        flags = self.status_by_category.get(category) or {}
        return frozenset(status for status, flag in flags.items() if flag)

    def is_unrestricted(self) -> bool:
        return self.all_categories_selected() or not self.selected_categories()


def toggle_category(spec: FilterSpec, key: str) -> FilterSpec:
    """
    Return a new spec with ``key`` flipped.

    Toggling the 'all' entry clears every category selection.
    """
    key = key.strip().lower()
    if key == ALL_CATEGORIES:
        return spec.model_copy(update={"categories": {}})
    categories = dict(spec.categories)
    categories[key] = not categories.get(key, False)
    return spec.model_copy(update={"categories": categories})


def toggle_status(spec: FilterSpec, category: str, status: str) -> FilterSpec:
    category = category.strip().lower()
    status = status.strip().lower()
    statuses = {key: dict(flags) for key, flags in spec.status_by_category.items()}
    flags = statuses.setdefault(category, {})
    flags[status] = not flags.get(status, False)
    return spec.model_copy(update={"status_by_category": statuses})


def default_filter_spec() -> FilterSpec:
    """Initial dashboard selection: accounting and audit clients that are active."""
    return FilterSpec(
        categories={"acc": True, "audit": True},
        status_by_category={
            "acc": {STATUS_ACTIVE: True},
            "audit": {STATUS_ACTIVE: True},
        },
    )


class CompanyFilterRequest(BaseModel):
    filters: FilterSpec = Field(
        default_factory=FilterSpec,
        description="Category/status selection. Empty means no category restriction.",
    )
    search: str = Field(
        default="", description="Case-insensitive substring matched against the company name."
    )
    now: Optional[datetime] = Field(
        default=None, description="Reference instant; defaults to the current time."
    )
    limit: Optional[int] = Field(
        default=None, ge=1, le=5000, description="Maximum number of companies to return."
    )


class FilterMeta(BaseModel):
    total_companies: int
    matched: int
    returned: int


class CompanyFilterResponse(BaseModel):
    filters: FilterSpec
    meta: FilterMeta
    companies: List[Dict[str, Any]]


class CategoryCountsRequest(BaseModel):
    search: str = ""
    now: Optional[datetime] = None


class StatusCounts(BaseModel):
    all: int = 0
    active: int = 0
    inactive: int = 0


class CategoryCountsResponse(BaseModel):
    counts: Dict[str, StatusCounts]
