"""
Ledger-based reports: cash book, general ledger, party statement,
ledger abstract, trial balance and day book.
"""

import logging
from decimal import Decimal
from uuid import UUID

from ledgerbook.core.exceptions import NotFoundError
from ledgerbook.domain.classifier import balance_type
from ledgerbook.domain.entities import Ledger
from ledgerbook.domain.services import BalanceService, LedgerActivity, order_vouchers
from ledgerbook.domain.value_objects import (
    BALANCE_TOLERANCE,
    ZERO,
    BalanceType,
    DateRange,
    LedgerStatus,
    LedgerType,
)

from .common import contra_ledger, group_sections, ledger_ref, period, total, totals

logger = logging.getLogger(__name__)

CASH_AND_BANK = (LedgerType.CASH, LedgerType.BANK)


def _dr_cr(balance: Decimal, debit_nature: bool) -> tuple[Decimal, Decimal]:
    """Split a signed balance into (debit column, credit column)."""
    if balance_type(balance, debit_nature) == BalanceType.DR.value:
        return abs(balance), ZERO
    return ZERO, abs(balance)


class LedgerReportService:
    """Assembles the ledger reports from BalanceService activity."""

    def __init__(self, balances: BalanceService):
        self.balances = balances
        self.ledger_repo = balances.ledger_repo
        self.voucher_repo = balances.voucher_repo

    def _get_ledger(self, ledger_id: UUID) -> Ledger:
        ledger = self.ledger_repo.get_by_id(ledger_id)
        if ledger is None:
            raise NotFoundError("Ledger", ledger_id)
        return ledger

    def _active_ledgers(self, ledger_types=None) -> list[Ledger]:
        return self.ledger_repo.list_ledgers(
            ledger_types=ledger_types, status=LedgerStatus.ACTIVE.value
        )

    def cash_book(self, date_range: DateRange) -> dict:
        """Running statement of the active Cash ledger."""
        cash_ledgers = self._active_ledgers([LedgerType.CASH])
        if not cash_ledgers:
            raise NotFoundError("Cash ledger")
        cash = cash_ledgers[0]

        activity = self.balances.ledger_activity(cash, date_range)
        transactions = []
        for step in activity.steps:
            posting = step.posting
            is_receipt = posting.debit_amount > 0
            contra_name, _ = contra_ledger(posting.voucher, {cash.id})
            transactions.append({
                "date": posting.voucher_date,
                "voucherNumber": posting.voucher_number,
                "voucherType": posting.voucher.voucher_type,
                "particulars": f"From {contra_name}" if is_receipt else f"To {contra_name}",
                "voucherId": posting.voucher.id,
                "debit": posting.debit_amount,
                "credit": posting.credit_amount,
                "balance": step.balance,
                "balanceType": step.balance_type,
                "narration": posting.narration,
            })

        logger.info("Cash book %s: %d transactions", cash.name, len(transactions))
        return {
            **period(date_range),
            "ledger": ledger_ref(cash),
            **self._balances(activity),
            "transactions": transactions,
            "summary": {
                "totalReceipts": activity.total_debits,
                "totalPayments": activity.total_credits,
                "netChange": activity.total_debits - activity.total_credits,
            },
        }

    def general_ledger(self, ledger_id: UUID, date_range: DateRange) -> dict:
        ledger = self._get_ledger(ledger_id)
        activity = self.balances.ledger_activity(ledger, date_range)

        transactions = []
        for step in activity.steps:
            posting = step.posting
            contra_name, _ = contra_ledger(posting.voucher, {ledger.id})
            transactions.append({
                "date": posting.voucher_date,
                "voucherNumber": posting.voucher_number,
                "voucherType": posting.voucher.voucher_type,
                "particulars": contra_name,
                "voucherId": posting.voucher.id,
                "debit": posting.debit_amount,
                "credit": posting.credit_amount,
                "balance": step.balance,
                "balanceType": step.balance_type,
                "narration": posting.narration,
            })

        return {
            "ledger": ledger_ref(ledger),
            **period(date_range),
            **self._balances(activity),
            "transactions": transactions,
            "summary": {
                "totalDebits": activity.total_debits,
                "totalCredits": activity.total_credits,
                "difference": activity.total_debits - activity.total_credits,
            },
        }

    def party_statement(self, ledger_id: UUID, date_range: DateRange) -> dict:
        """Statement of one party ledger; particulars carry the narration."""
        ledger = self._get_ledger(ledger_id)
        activity = self.balances.ledger_activity(ledger, date_range)

        transactions = [
            {
                "date": step.posting.voucher_date,
                "voucherNumber": step.posting.voucher_number,
                "voucherType": step.posting.voucher.voucher_type,
                "particulars": step.posting.narration,
                "debitAmount": step.posting.debit_amount,
                "creditAmount": step.posting.credit_amount,
                "referenceType": step.posting.voucher.reference_type,
                "balance": step.balance,
                "balanceType": step.balance_type,
            }
            for step in activity.steps
        ]

        return {
            "ledger": ledger_ref(ledger),
            **period(date_range),
            "summary": {
                **self._balances(activity),
                "totalDebits": activity.total_debits,
                "totalCredits": activity.total_credits,
            },
            "transactions": transactions,
        }

    @staticmethod
    def _balances(activity: LedgerActivity) -> dict:
        return {
            "openingBalance": abs(activity.opening_balance),
            "openingBalanceType": activity.opening_type,
            "closingBalance": abs(activity.closing_balance),
            "closingBalanceType": activity.closing_type,
        }

    def ledger_abstract(self, date_range: DateRange, ledger_type: str | None = None) -> dict:
        """Every active ledger, with or without period activity."""
        ledgers = self._active_ledgers([ledger_type] if ledger_type else None)
        activities = self.balances.ledger_activities(ledgers, date_range)

        rows = []
        for activity in activities:
            ledger = activity.ledger
            opening_dr, opening_cr = _dr_cr(activity.opening_balance, activity.debit_nature)
            closing_dr, closing_cr = _dr_cr(activity.closing_balance, activity.debit_nature)
            rows.append({
                "ledgerId": ledger.id,
                "ledgerName": ledger.name,
                "ledgerType": ledger.ledger_type,
                "category": self.balances.classifier.get_category(ledger.ledger_type).value,
                **self._balances(activity),
                "openingDebit": opening_dr,
                "openingCredit": opening_cr,
                "totalDebits": activity.total_debits,
                "totalCredits": activity.total_credits,
                "closingDebit": closing_dr,
                "closingCredit": closing_cr,
            })

        def summarize(section_rows: list[dict]) -> dict:
            return {
                "totalLedgers": len(section_rows),
                "totalOpeningDebit": total(section_rows, "openingDebit"),
                "totalOpeningCredit": total(section_rows, "openingCredit"),
                "totalDebits": total(section_rows, "totalDebits"),
                "totalCredits": total(section_rows, "totalCredits"),
                "totalClosingDebit": total(section_rows, "closingDebit"),
                "totalClosingCredit": total(section_rows, "closingCredit"),
            }

        return {
            **period(date_range),
            "abstract": rows,
            "sections": group_sections(rows, summarize),
            "summary": summarize(rows),
        }

    def trial_balance(self, date_range: DateRange) -> dict:
        """
        Opening, period and closing columns per active ledger.

        Ledgers without debit or credit postings inside the range are left
        out, whatever their opening or closing balance.
        """
        ledgers = self._active_ledgers()
        activities = self.balances.ledger_activities(ledgers, date_range)

        rows = []
        for activity in activities:
            if not activity.has_period_activity:
                continue
            ledger = activity.ledger
            opening_dr, opening_cr = _dr_cr(activity.opening_balance, activity.debit_nature)
            closing_dr, closing_cr = _dr_cr(activity.closing_balance, activity.debit_nature)
            rows.append({
                "ledgerId": ledger.id,
                "ledgerName": ledger.name,
                "ledgerType": ledger.ledger_type,
                "category": self.balances.classifier.get_category(ledger.ledger_type).value,
                "openingDebit": opening_dr,
                "openingCredit": opening_cr,
                "periodDebit": activity.total_debits,
                "periodCredit": activity.total_credits,
                "closingDebit": closing_dr,
                "closingCredit": closing_cr,
            })

        columns = (
            "openingDebit", "openingCredit", "periodDebit",
            "periodCredit", "closingDebit", "closingCredit",
        )
        grand = totals(rows, columns)
        difference = grand["closingDebit"] - grand["closingCredit"]
        if abs(difference) > BALANCE_TOLERANCE:
            logger.warning("Trial balance out by %s for %s", difference, date_range)

        return {
            **period(date_range),
            "rows": rows,
            "sections": group_sections(rows, lambda section_rows: totals(section_rows, columns)),
            "grandTotal": grand,
            "summary": {
                "totalLedgers": len(rows),
                "excludedLedgers": len(activities) - len(rows),
                "isBalanced": abs(difference) <= BALANCE_TOLERANCE,
                "difference": abs(difference),
            },
        }

    def day_book(self, date_range: DateRange) -> dict:
        """All vouchers of the range, debits on the payment side and credits
        on the receipt side; cash and bank balances bracket the period."""
        vouchers = order_vouchers(self.voucher_repo.list_vouchers(date_range=date_range))

        receipt_side = []
        payment_side = []
        for voucher in vouchers:
            voucher.validate()
            for entry in voucher.entries:
                row = {
                    "date": voucher.voucher_date,
                    "voucherNumber": voucher.voucher_number,
                    "voucherType": voucher.voucher_type,
                    "ledgerName": entry.ledger_name,
                    "ledgerType": entry.ledger_type,
                    "narration": entry.narration or voucher.narration,
                    "voucherId": voucher.id,
                }
                if entry.debit_amount > 0:
                    payment_side.append({**row, "amount": entry.debit_amount})
                if entry.credit_amount > 0:
                    receipt_side.append({**row, "amount": entry.credit_amount})

        cash_bank = self.balances.ledger_activities(self._active_ledgers(CASH_AND_BANK), date_range)
        opening = sum((a.opening_balance for a in cash_bank), ZERO)
        closing = sum((a.closing_balance for a in cash_bank), ZERO)
        cash_in = sum((a.total_debits for a in cash_bank), ZERO)
        cash_out = sum((a.total_credits for a in cash_bank), ZERO)

        return {
            **period(date_range),
            "receiptSide": receipt_side,
            "paymentSide": payment_side,
            "summary": {
                "openingBalance": opening,
                "closingBalance": closing,
                "totalReceipts": total(receipt_side, "amount"),
                "totalPayments": total(payment_side, "amount"),
                "cashReceipts": cash_in,
                "cashPayments": cash_out,
            },
        }
