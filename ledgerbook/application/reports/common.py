"""
Helpers shared by the report assemblers.
"""

from collections.abc import Callable, Iterable
from decimal import Decimal
from uuid import UUID

from ledgerbook.domain.entities import Ledger, Voucher
from ledgerbook.domain.value_objects import ZERO, DateRange, LedgerCategory

VARIOUS = "Various"
OTHER_LEDGER_TYPE = "Other"

CATEGORY_ORDER = (
    LedgerCategory.ASSETS,
    LedgerCategory.LIABILITIES,
    LedgerCategory.CAPITAL,
    LedgerCategory.INCOME,
    LedgerCategory.EXPENSES,
    LedgerCategory.OTHER,
)


def contra_ledger(voucher: Voucher, subject_ids: set[UUID]) -> tuple[str, str]:
    """
    Name and type of the other side of a two-entry voucher.

    Anything else (more entries, or both entries on subject ledgers)
    reads as "Various".
    """
    others = [e for e in voucher.entries if e.ledger_id not in subject_ids]
    if len(voucher.entries) == 2 and len(others) == 1:
        return others[0].ledger_name, others[0].ledger_type or OTHER_LEDGER_TYPE
    return VARIOUS, OTHER_LEDGER_TYPE


def total(rows: Iterable[dict], key: str) -> Decimal:
    return sum((row[key] for row in rows), ZERO)


def totals(rows: list[dict], keys: Iterable[str]) -> dict[str, Decimal]:
    return {key: total(rows, key) for key in keys}


def group_sections(
    rows: list[dict],
    summarize: Callable[[list[dict]], dict],
    section_of: Callable[[dict], str] = lambda row: row["category"],
    order: Iterable[str] = tuple(c.value for c in CATEGORY_ORDER),
    names: dict[str, str] | None = None,
) -> list[dict]:
    """
    Group rows into ordered sections, each with its own subtotal.

    Empty sections are dropped; rows keep their relative order.
    """
    buckets: dict[str, list[dict]] = {section: [] for section in order}
    for row in rows:
        buckets.setdefault(section_of(row), []).append(row)

    sections = []
    for section, section_rows in buckets.items():
        if not section_rows:
            continue
        sections.append({
            "category": section,
            "sectionName": (names or {}).get(section, section),
            "ledgers": section_rows,
            "groupTotal": summarize(section_rows),
        })
    return sections


def ledger_ref(ledger: Ledger) -> dict:
    return {"id": ledger.id, "name": ledger.name, "type": ledger.ledger_type}


def period(date_range: DateRange) -> dict:
    return {"startDate": date_range.start_date, "endDate": date_range.end_date}
