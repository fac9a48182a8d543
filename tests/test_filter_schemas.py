import pytest
from pydantic import ValidationError

from backoffice.schemas.filters import (
    CompanyFilterRequest,
    FilterSpec,
    default_filter_spec,
    toggle_category,
    toggle_status,
)


def test_filter_spec_accepts_ui_payload_with_alias():
    spec = FilterSpec.model_validate(
        {"categories": {"ACC": True, "audit": False}, "statusByCategory": {"acc": {"active": True}}}
    )
    assert spec.selected_categories() == ["acc"]
    assert spec.selected_statuses("acc") == frozenset({"active"})
    assert spec.selected_statuses("audit") == frozenset()


def test_filter_spec_accepts_key_collections():
    spec = FilterSpec(categories=["acc", "imm"], status_by_category={"imm": ["inactive"]})
    assert spec.categories == {"acc": True, "imm": True}
    assert spec.selected_statuses("imm") == frozenset({"inactive"})


def test_selected_categories_drops_sentinel_and_unknown_keys():
    spec = FilterSpec(categories={"all": True, "acc": True, "payroll": True})
    assert spec.all_categories_selected() is True
    assert spec.selected_categories() == ["acc", "payroll"]
    assert spec.selected_categories(known=["acc", "audit"]) == ["acc"]


def test_is_unrestricted():
    assert FilterSpec().is_unrestricted() is True
    assert FilterSpec(categories={"acc": False}).is_unrestricted() is True
    assert FilterSpec(categories={"all": True, "acc": True}).is_unrestricted() is True
    assert FilterSpec(categories={"acc": True}).is_unrestricted() is False


def test_filter_spec_is_frozen():
    spec = FilterSpec(categories={"acc": True})
    with pytest.raises(ValidationError):
        spec.categories = {}


def test_toggle_category_returns_new_spec():
    spec = FilterSpec(categories={"acc": True})
    toggled = toggle_category(spec, "audit")

    assert toggled.categories == {"acc": True, "audit": True}
    assert spec.categories == {"acc": True}
    assert toggle_category(toggled, "audit").selected_categories() == ["acc"]


def test_toggle_all_clears_category_selection():
    default = default_filter_spec()
    cleared = toggle_category(default, "all")
    assert cleared.categories == {}
    assert cleared.is_unrestricted() is True
    assert cleared.status_by_category == default.status_by_category


def test_toggle_status_does_not_mutate_original():
    default = default_filter_spec()
    toggled = toggle_status(default, "acc", "inactive")
    assert toggled.selected_statuses("acc") == frozenset({"active", "inactive"})
    assert default.selected_statuses("acc") == frozenset({"active"})


def test_company_filter_request_defaults_and_limits():
    request = CompanyFilterRequest()
    assert request.filters.is_unrestricted()
    assert request.search == ""
    assert request.now is None

    with pytest.raises(ValidationError):
        CompanyFilterRequest(limit=0)


def test_default_filter_spec_is_fresh_per_call():
    first = default_filter_spec()
    first.categories["sheria"] = True
    first.status_by_category["acc"]["inactive"] = True

    second = default_filter_spec()
    assert second.categories == {"acc": True, "audit": True}
    assert second.selected_statuses("acc") == frozenset({"active"})
