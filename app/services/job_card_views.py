"""
List views over fetched job cards.

The archive database page filters, sorts and pages in memory over the
archived cards it has loaded. The portals group open cards into one
column per assignee.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence

from app.config import settings
from app.services.job_number import sort_key

DEFAULT_PAGE_SIZE = 25


class SearchField(str, Enum):
    all = "all"
    rego = "rego"
    invoice_number = "invoice_number"
    customer_name = "customer_name"
    company_name = "company_name"
    mobile = "mobile"


class DateFilter(str, Enum):
    all = "all"
    year = "year"
    month_year = "month_year"


class PaymentFilter(str, Enum):
    all = "all"
    paid = "paid"
    unpaid = "unpaid"


class SortOrder(str, Enum):
    newest = "newest"
    oldest = "oldest"


ALL_FIELDS_SEARCH = (
    "job_number",
    "customer_name",
    "company_name",
    "rego",
    "invoice_number",
    "mobile",
    "vehicle_make",
    "vehicle_model",
)


@dataclass
class DatabaseQuery:
    search: Optional[str] = None
    search_field: SearchField = SearchField.all
    date_filter: DateFilter = DateFilter.all
    year: Optional[str] = None
    month: Optional[str] = None
    payment: PaymentFilter = PaymentFilter.all
    sort: SortOrder = SortOrder.newest
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class Page:
    items: list
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


def _contains(card, field: str, term: str) -> bool:
    value = getattr(card, field, None)
    return value is not None and term in str(value).lower()


def matches_search(card, term: str, field: SearchField = SearchField.all) -> bool:
    term = (term or "").strip().lower()
    if not term:
        return True
    if field == SearchField.all:
        return any(_contains(card, f, term) for f in ALL_FIELDS_SEARCH)
    return _contains(card, field.value, term)


def _local(created_at: datetime) -> datetime:
    # Naive timestamps come back from SQLite and are UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(settings.business_timezone)


def matches_date(card, date_filter: DateFilter, year: Optional[str], month: Optional[str]) -> bool:
    """Filter on the creation date in workshop local time.

    A filter missing its year (or month) matches everything.
    """
    created_at = getattr(card, "created_at", None)
    if date_filter == DateFilter.all or not year or created_at is None:
        return True
    local = _local(created_at)
    if date_filter == DateFilter.year:
        return str(local.year) == year
    if not month:
        return True
    return str(local.year) == year and f"{local.month:02d}" == month.zfill(2)


def matches_payment(card, payment: PaymentFilter) -> bool:
    return payment == PaymentFilter.all or getattr(card, "payment_status", None) == payment.value


def sort_by_job_number(cards: Sequence, order: SortOrder = SortOrder.newest) -> list:
    return sorted(
        cards,
        key=lambda card: sort_key(card.job_number),
        reverse=order == SortOrder.newest,
    )


def paginate(items: Sequence, page: int, page_size: int) -> Page:
    start = (page - 1) * page_size
    return Page(items=list(items[start:start + page_size]), total=len(items), page=page, page_size=page_size)


def database_page(cards: Sequence, query: DatabaseQuery) -> Page:
    """Search, date filter, payment filter, sort, then page."""
    filtered = [
        card for card in cards
        if matches_search(card, query.search, query.search_field)
        and matches_date(card, query.date_filter, query.year, query.month)
        and matches_payment(card, query.payment)
    ]
    return paginate(sort_by_job_number(filtered, query.sort), query.page, query.page_size)


def group_by_assignee(cards: Sequence, names: Sequence[str], attribute: str) -> list[tuple[str, list]]:
    """One ``(name, cards)`` column per name; cards for unknown assignees are left out."""
    return [
        (name, [card for card in cards if getattr(card, attribute, None) == name])
        for name in names
    ]
