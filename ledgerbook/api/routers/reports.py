"""
API Routers - Report endpoints.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ledgerbook.api.dependencies import (
    get_date_range,
    get_gst_returns,
    get_ledger_reports,
    get_receipts_disbursement,
    get_stock_register,
)
from ledgerbook.application.reports.gst import GstReturnService
from ledgerbook.application.reports.ledger_reports import LedgerReportService
from ledgerbook.application.reports.receipts_disbursement import (
    THREE_COLUMN,
    ReceiptsDisbursementService,
)
from ledgerbook.application.reports.stock_register import DAY, StockRegisterService
from ledgerbook.core.config import get_settings
from ledgerbook.domain.dates import financial_years
from ledgerbook.domain.value_objects import DateRange

router = APIRouter(prefix="/api/v1/reports", tags=["Reports"])


@router.get("/cash-book")
def get_cash_book(
    date_range: DateRange = Depends(get_date_range),
    reports: LedgerReportService = Depends(get_ledger_reports),
):
    """Cash book of the active Cash ledger with running balance."""
    return reports.cash_book(date_range)


@router.get("/general-ledger")
def get_general_ledger(
    ledger_id: UUID = Query(..., alias="ledgerId"),
    date_range: DateRange = Depends(get_date_range),
    reports: LedgerReportService = Depends(get_ledger_reports),
):
    return reports.general_ledger(ledger_id, date_range)


@router.get("/ledger-abstract")
def get_ledger_abstract(
    ledger_type: str | None = Query(None, alias="ledgerType"),
    date_range: DateRange = Depends(get_date_range),
    reports: LedgerReportService = Depends(get_ledger_reports),
):
    """Opening, period totals and closing of every active ledger."""
    return reports.ledger_abstract(date_range, ledger_type)


@router.get("/party-statement")
def get_party_statement(
    ledger_id: UUID = Query(..., alias="ledgerId"),
    date_range: DateRange = Depends(get_date_range),
    reports: LedgerReportService = Depends(get_ledger_reports),
):
    return reports.party_statement(ledger_id, date_range)


@router.get("/trial-balance")
def get_trial_balance(
    date_range: DateRange = Depends(get_date_range),
    reports: LedgerReportService = Depends(get_ledger_reports),
):
    """
    Trial balance for the period.

    Ledgers without postings inside the period are omitted.
    """
    return reports.trial_balance(date_range)


@router.get("/receipts-disbursement")
def get_receipts_disbursement_report(
    format: str = Query(THREE_COLUMN, description="singleColumn, threeColumn, classified, threeColumnLedgerwise, singleColumnMonthly"),
    date_range: DateRange = Depends(get_date_range),
    service: ReceiptsDisbursementService = Depends(get_receipts_disbursement),
):
    return service.statement(date_range, format)


@router.get("/day-book")
def get_day_book(
    date_range: DateRange = Depends(get_date_range),
    reports: LedgerReportService = Depends(get_ledger_reports),
):
    return reports.day_book(date_range)


@router.get("/stock-register")
def get_stock_register_report(
    mode: str = Query(DAY, description="day, month or range"),
    item_id: UUID | None = Query(None, alias="itemId"),
    date_range: DateRange = Depends(get_date_range),
    service: StockRegisterService = Depends(get_stock_register),
):
    return service.register(date_range, mode, item_id)


@router.get("/gstr1")
def get_gstr1(
    date_range: DateRange = Depends(get_date_range),
    service: GstReturnService = Depends(get_gst_returns),
):
    """GSTR-1 summary of outward supplies."""
    return service.gstr1(date_range)


@router.get("/gstr2")
def get_gstr2(
    date_range: DateRange = Depends(get_date_range),
    service: GstReturnService = Depends(get_gst_returns),
):
    """GSTR-2 summary of inward supplies and input tax credit."""
    return service.gstr2(date_range)


@router.get("/financial-years")
def get_financial_years(years_back: int = Query(5, alias="yearsBack", ge=1, le=20)):
    settings = get_settings()
    return financial_years(date.today(), years_back, settings.financial_year_start_month)
