"""
FastAPI dependencies - wire SQL stores into the report services.
"""

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from ledgerbook.application.reports.gst import GstReturnService
from ledgerbook.application.reports.ledger_reports import LedgerReportService
from ledgerbook.application.reports.receipts_disbursement import ReceiptsDisbursementService
from ledgerbook.application.reports.stock_register import StockRegisterService
from ledgerbook.core.config import get_settings
from ledgerbook.domain.classifier import BalanceClassifier
from ledgerbook.domain.dates import resolve_date_range
from ledgerbook.domain.services import BalanceService
from ledgerbook.domain.value_objects import DateRange
from ledgerbook.infrastructure.database import get_db
from ledgerbook.infrastructure.database.repositories import (
    SqlInvoiceRepository,
    SqlItemRepository,
    SqlLedgerRepository,
    SqlStockTransactionRepository,
    SqlVoucherRepository,
)


def get_balance_service(db: Session = Depends(get_db)) -> BalanceService:
    settings = get_settings()
    return BalanceService(
        SqlLedgerRepository(db),
        SqlVoucherRepository(db),
        BalanceClassifier(unknown_debit_nature=settings.unknown_ledger_debit_nature),
    )


def get_ledger_reports(
    balances: BalanceService = Depends(get_balance_service),
) -> LedgerReportService:
    return LedgerReportService(balances)


def get_receipts_disbursement(
    balances: BalanceService = Depends(get_balance_service),
) -> ReceiptsDisbursementService:
    return ReceiptsDisbursementService(balances)


def get_stock_register(db: Session = Depends(get_db)) -> StockRegisterService:
    return StockRegisterService(SqlItemRepository(db), SqlStockTransactionRepository(db))


def get_gst_returns(db: Session = Depends(get_db)) -> GstReturnService:
    return GstReturnService(SqlInvoiceRepository(db))


def get_date_range(
    filter_type: str | None = Query(None, alias="filterType", description="thisMonth, lastMonth, thisQuarter, thisYear, financialYear, custom"),
    custom_start: str | None = Query(None, alias="customStart", description="Start date for custom filter"),
    custom_end: str | None = Query(None, alias="customEnd", description="End date for custom filter"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
) -> DateRange:
    """Report period from the common query parameters."""
    return resolve_date_range(
        filter_type,
        custom_start=custom_start,
        custom_end=custom_end,
        start_date=start_date,
        end_date=end_date,
        fy_start_month=get_settings().financial_year_start_month,
    )
