"""
Service categories a client company can subscribe to.

Each category maps to one pair of effective-date columns on a company row.
The table is built once so the rest of the code never concatenates field
names by hand.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

ALL_CATEGORIES = "all"

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUS_ALL = "all"
STATUS_OPTIONS = (STATUS_ALL, STATUS_ACTIVE, STATUS_INACTIVE)


@dataclass(frozen=True)
class CategoryFields:
    key: str
    label: str
    from_field: str
    to_field: str


def category_fields(key: str, label: Optional[str] = None) -> CategoryFields:
    return CategoryFields(
        key=key,
        label=label or key.replace("_", " ").title(),
        from_field=f"{key}_client_effective_from",
        to_field=f"{key}_client_effective_to",
    )


_BUILTIN_LABELS = {
    "acc": "Accounting",
    "audit": "Audit",
    "sheria": "Sheria",
    "imm": "Immigration",
}


def build_category_table(
    extra_keys: Iterable[str] = (),
    labels: Mapping[str, str] = _BUILTIN_LABELS,
) -> Dict[str, CategoryFields]:
    """Build the category lookup table: built-in categories first, then extras."""
    table = {key: category_fields(key, label) for key, label in labels.items()}
    for key in extra_keys:
        key = key.strip().lower()
        if key and key != ALL_CATEGORIES and key not in table:
            table[key] = category_fields(key)
    return table


CATEGORY_FIELDS: Dict[str, CategoryFields] = build_category_table()
