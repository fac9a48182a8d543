from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from backoffice.core.categories import (
    CATEGORY_FIELDS,
    STATUS_ACTIVE,
    STATUS_ALL,
    STATUS_INACTIVE,
    CategoryFields,
    build_category_table,
)
from backoffice.core.config import Settings, settings
from backoffice.schemas.filters import FilterSpec
from backoffice.services.date_parsing import is_blank, parse_effective_date

CompanyRecord = Mapping[str, Any]
Instant = Union[date, datetime]

NAME_FIELDS = ("name", "company_name")
FAR_FUTURE = date(9999, 12, 31)


class OpenEndedPolicy(str, Enum):
    """How a membership with a start date but no end date is treated."""

    STILL_ACTIVE = "still_active"
    REQUIRE_BOTH = "require_both"

    @classmethod
    def parse(cls, raw: str) -> "OpenEndedPolicy":
        try:
            return cls(raw.strip().lower())
        except ValueError:
            allowed = ", ".join(policy.value for policy in cls)
            raise ValueError(
                f"OPEN_ENDED_MEMBERSHIP must be one of: {allowed} (got {raw!r})"
            ) from None


def display_name(record: CompanyRecord) -> str:
    for field in NAME_FIELDS:
        value = record.get(field)
        if not is_blank(value):
            return str(value)
    return ""


def reference_date(now: Optional[Instant]) -> date:
    if now is None:
        return datetime.now().date()
    if isinstance(now, datetime):
        return now.date()
    return now


class ClientStatusFilterEngine:
    """
    Decides whether companies are active clients of each service category
    and whether they pass a dashboard's category/status filter.

    Stateless apart from its configuration, so one instance can be shared
    across requests.
    """

    def __init__(
        self,
        open_ended: OpenEndedPolicy = OpenEndedPolicy.STILL_ACTIVE,
        categories: Optional[Dict[str, CategoryFields]] = None,
        far_future: date = FAR_FUTURE,
    ) -> None:
        self.open_ended = open_ended
        self.categories = dict(categories) if categories is not None else dict(CATEGORY_FIELDS)
        self.far_future = far_future

    @classmethod
    def from_settings(cls, config: Settings) -> "ClientStatusFilterEngine":
        return cls(
            open_ended=OpenEndedPolicy.parse(config.OPEN_ENDED_MEMBERSHIP),
            categories=build_category_table(config.EXTRA_CATEGORIES),
            far_future=date.fromisoformat(config.FAR_FUTURE_DATE),
        )

    def company_belongs_to_category(self, record: CompanyRecord, category: str) -> bool:
        fields = self.categories.get(category)
        if fields is None:
            return False
        return not is_blank(record.get(fields.from_field))

    def member_categories(self, record: CompanyRecord) -> List[str]:
        return [key for key in self.categories if self.company_belongs_to_category(record, key)]

    def resolve_category_status(
        self,
        record: CompanyRecord,
        category: str,
        now: Optional[Instant] = None,
    ) -> str:
        return self._resolve(record, category, reference_date(now))

    def _resolve(self, record: CompanyRecord, category: str, today: date) -> str:
        fields = self.categories.get(category)
        if fields is None:
            return STATUS_INACTIVE

        raw_from = record.get(fields.from_field)
        raw_to = record.get(fields.to_field)
        if is_blank(raw_from):
            return STATUS_INACTIVE
        if is_blank(raw_to) and self.open_ended is OpenEndedPolicy.REQUIRE_BOTH:
            return STATUS_INACTIVE

        start = parse_effective_date(raw_from, field=fields.from_field)
        if start is None:
            return STATUS_INACTIVE

        if is_blank(raw_to):
            end = self.far_future
        else:
            end = parse_effective_date(raw_to, field=fields.to_field)
            if end is None:
                return STATUS_INACTIVE

        return STATUS_ACTIVE if start <= today <= end else STATUS_INACTIVE

    def _category_matches(
        self,
        record: CompanyRecord,
        category: str,
        statuses: FrozenSet[str],
        today: date,
    ) -> bool:
        # No status chosen (or "all") accepts members and non-members alike.
        if not statuses or STATUS_ALL in statuses:
            return True
        if not self.company_belongs_to_category(record, category):
            return False
        return self._resolve(record, category, today) in statuses

    def _matches(self, record: CompanyRecord, spec: FilterSpec, today: date) -> bool:
        if spec.is_unrestricted():
            return True
        selected = spec.selected_categories(known=self.categories)
        if not selected:
            return True
        # Every selected category must match, not just one of them.
        return all(
            self._category_matches(record, category, spec.selected_statuses(category), today)
            for category in selected
        )

    def matches_filter(
        self,
        record: CompanyRecord,
        spec: FilterSpec,
        now: Optional[Instant] = None,
    ) -> bool:
        return self._matches(record, spec, reference_date(now))

    def filter_companies(
        self,
        records: Iterable[CompanyRecord],
        spec: FilterSpec,
        search_term: str = "",
        now: Optional[Instant] = None,
    ) -> List[CompanyRecord]:
        """
        Return the records whose name contains ``search_term`` and that pass
        ``spec``, in their original order.
        """
        today = reference_date(now)
        needle = (search_term or "").lower()
        return [
            record
            for record in records
            if matches_search(record, needle) and self._matches(record, spec, today)
        ]


def matches_search(record: CompanyRecord, search_term: str) -> bool:
    if not search_term:
        return True
    return search_term.lower() in display_name(record).lower()


default_engine = ClientStatusFilterEngine.from_settings(settings)


def resolve_category_status(
    record: CompanyRecord, category: str, now: Optional[Instant] = None
) -> str:
    return default_engine.resolve_category_status(record, category, now)


def company_belongs_to_category(record: CompanyRecord, category: str) -> bool:
    return default_engine.company_belongs_to_category(record, category)


def matches_filter(
    record: CompanyRecord, spec: FilterSpec, now: Optional[Instant] = None
) -> bool:
    return default_engine.matches_filter(record, spec, now)


def filter_companies(
    records: Iterable[CompanyRecord],
    spec: FilterSpec,
    search_term: str = "",
    now: Optional[Instant] = None,
) -> List[CompanyRecord]:
    return default_engine.filter_companies(records, spec, search_term, now)
