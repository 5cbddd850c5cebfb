"""Application layer - Report assembly and DTOs."""

from ledgerbook.application.dto.accounting_dto import (
    InvoiceCreateDTO,
    ItemCreateDTO,
    LedgerCreateDTO,
    LedgerResponseDTO,
    StockTransactionCreateDTO,
    VoucherCreateDTO,
    VoucherResponseDTO,
)
from ledgerbook.application.reports.gst import GstReturnService
from ledgerbook.application.reports.ledger_reports import LedgerReportService
from ledgerbook.application.reports.receipts_disbursement import ReceiptsDisbursementService
from ledgerbook.application.reports.stock_register import StockRegisterService
