"""
Tests for the archive database view and the portal grouping.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

from app.services.job_card_views import (
    DatabaseQuery,
    DateFilter,
    PaymentFilter,
    SearchField,
    SortOrder,
    database_page,
    group_by_assignee,
    matches_date,
    matches_search,
    paginate,
)


def _card(job_number: str, **values) -> SimpleNamespace:
    card = {
        "job_number": job_number,
        "customer_name": None,
        "company_name": None,
        "rego": None,
        "invoice_number": None,
        "mobile": None,
        "vehicle_make": None,
        "vehicle_model": None,
        "payment_status": "unpaid",
        "assigned_worker": None,
        "created_at": datetime(2025, 3, 4, 1, 0, tzinfo=timezone.utc),
    }
    card.update(values)
    return SimpleNamespace(**card)


class TestSearch:

    def test_all_fields(self):
        card = _card("JC-2025-03-001", vehicle_make="Kenworth")
        assert matches_search(card, "kenworth")
        assert matches_search(card, "2025-03")
        assert not matches_search(card, "volvo")

    def test_single_field(self):
        card = _card("JC-2025-03-001", rego="ABC123", customer_name="ABC Haulage")
        assert matches_search(card, "abc", SearchField.rego)
        assert not matches_search(card, "haulage", SearchField.rego)

    def test_blank_term_matches(self):
        assert matches_search(_card("JC-2025-03-001"), "  ")


class TestDateFilter:

    def test_year_and_month(self):
        card = _card("JC-2025-03-001")
        assert matches_date(card, DateFilter.year, "2025", None)
        assert not matches_date(card, DateFilter.year, "2024", None)
        assert matches_date(card, DateFilter.month_year, "2025", "3")
        assert not matches_date(card, DateFilter.month_year, "2025", "04")

    def test_uses_workshop_local_date(self):
        # 31 Dec 2024 20:00 UTC is 1 Jan 2025 in the workshop
        card = _card("JC-2025-01-001", created_at=datetime(2024, 12, 31, 20, 0))
        assert matches_date(card, DateFilter.year, "2025", None)

    def test_incomplete_filter_matches_everything(self):
        card = _card("JC-2025-03-001")
        assert matches_date(card, DateFilter.year, None, None)
        assert matches_date(card, DateFilter.month_year, "2025", None)


class TestDatabasePage:

    def test_sort_then_page(self):
        cards = [_card(f"JC-2025-03-{n:03d}") for n in (2, 10, 1)]
        page = database_page(cards, DatabaseQuery(page=1, page_size=2))
        assert [c.job_number for c in page.items] == ["JC-2025-03-010", "JC-2025-03-002"]
        assert page.total == 3
        assert page.total_pages == 2

        page = database_page(cards, DatabaseQuery(sort=SortOrder.oldest))
        assert [c.job_number for c in page.items] == [
            "JC-2025-03-001",
            "JC-2025-03-002",
            "JC-2025-03-010",
        ]

    def test_payment_filter(self):
        cards = [_card("JC-2025-03-001", payment_status="paid"), _card("JC-2025-03-002")]
        page = database_page(cards, DatabaseQuery(payment=PaymentFilter.unpaid))
        assert [c.job_number for c in page.items] == ["JC-2025-03-002"]

    def test_page_past_the_end(self):
        page = paginate([1, 2, 3], page=5, page_size=2)
        assert page.items == []
        assert page.total_pages == 2


class TestGrouping:

    def test_one_column_per_name(self):
        cards = [
            _card("JC-2025-03-001", assigned_worker="Worker 2"),
            _card("JC-2025-03-002", assigned_worker="Nobody"),
        ]
        groups = group_by_assignee(cards, ["Worker 1", "Worker 2"], "assigned_worker")
        assert [(name, len(rows)) for name, rows in groups] == [("Worker 1", 0), ("Worker 2", 1)]
