"""
Receipts & Disbursement statement in five layouts.

All layouts share the same classified set of cash/bank receipts and
payments; the ledger-wise layouts additionally walk every active ledger.
"""

import logging
from collections.abc import Callable

from ledgerbook.core.exceptions import InvalidInputError
from ledgerbook.domain.services import BalanceService, order_vouchers
from ledgerbook.domain.value_objects import ZERO, DateRange, LedgerStatus, LedgerType

from .common import contra_ledger, group_sections, period, total

logger = logging.getLogger(__name__)

SINGLE_COLUMN = "singleColumn"
THREE_COLUMN = "threeColumn"
CLASSIFIED = "classified"
THREE_COLUMN_LEDGERWISE = "threeColumnLedgerwise"
SINGLE_COLUMN_MONTHLY = "singleColumnMonthly"

FORMATS = (
    SINGLE_COLUMN,
    THREE_COLUMN,
    CLASSIFIED,
    THREE_COLUMN_LEDGERWISE,
    SINGLE_COLUMN_MONTHLY,
)

LEDGERWISE_SECTIONS = {
    "LIABILITIES": "Advance due by Society (LIABILITY)",
    "ASSETS": "Advance due to Society (ASSET)",
    "EXPENSES": "Contingencies/Expenses",
    "INCOME": "Income Accounts",
    "CAPITAL": "Capital & Reserves",
    "OTHER": "Other Accounts",
}

MONTHLY_SECTIONS = {
    "LIABILITY": "Liability",
    "ASSET": "Asset",
    "BANK": "Bank Accounts",
    "EXPENSE": "Contingencies / Expense",
}


def _triad() -> dict:
    return {"uptoMonth": ZERO, "duringMonth": ZERO, "endOfMonth": ZERO}


def _sum_triads(rows: list[dict]) -> dict:
    summary = {"receipt": _triad(), "payment": _triad()}
    for row in rows:
        for side in ("receipt", "payment"):
            for key in ("uptoMonth", "duringMonth", "endOfMonth"):
                summary[side][key] += row[side][key]
    return summary


def _sum_pairs(rows: list[dict]) -> dict:
    return {"receipt": total(rows, "receipt"), "payment": total(rows, "payment")}


class ReceiptsDisbursementService:

    def __init__(self, balances: BalanceService):
        self.balances = balances
        self.ledger_repo = balances.ledger_repo
        self.voucher_repo = balances.voucher_repo
        self._layouts: dict[str, Callable] = {
            SINGLE_COLUMN: self._single_column,
            THREE_COLUMN: self._three_column,
            CLASSIFIED: self._classified,
            THREE_COLUMN_LEDGERWISE: self._three_column_ledgerwise,
            SINGLE_COLUMN_MONTHLY: self._single_column_monthly,
        }

    def statement(self, date_range: DateRange, format: str = THREE_COLUMN) -> dict:
        layout = self._layouts.get(format)
        if layout is None:
            raise InvalidInputError(
                f"Unknown receipts & disbursement format: {format}. "
                f"Expected one of {', '.join(FORMATS)}"
            )

        cash_bank = self.ledger_repo.list_ledgers(
            ledger_types=[LedgerType.CASH, LedgerType.BANK],
            status=LedgerStatus.ACTIVE.value,
        )
        cash_ids = {ledger.id for ledger in cash_bank}
        opening = sum(self.balances.opening_balances(cash_bank, date_range.start_date).values(), ZERO)

        vouchers = []
        if cash_ids:
            vouchers = order_vouchers(
                self.voucher_repo.list_vouchers(date_range=date_range, ledger_ids=cash_ids)
            )

        receipts = []
        payments = []
        for voucher in vouchers:
            voucher.validate()
            for entry in voucher.entries:
                if entry.ledger_id not in cash_ids:
                    continue
                name, ledger_type = contra_ledger(voucher, cash_ids)
                row = {
                    "date": voucher.voucher_date,
                    "voucherNumber": voucher.voucher_number,
                    "particulars": name,
                    "ledgerType": ledger_type,
                    "narration": entry.narration or voucher.narration,
                }
                if entry.debit_amount > 0:
                    receipts.append({**row, "amount": entry.debit_amount})
                elif entry.credit_amount > 0:
                    payments.append({**row, "amount": entry.credit_amount})

        total_receipts = total(receipts, "amount")
        total_payments = total(payments, "amount")
        logger.info(
            "Receipts & disbursement (%s): %d receipts, %d payments",
            format, len(receipts), len(payments),
        )

        return {
            **period(date_range),
            "format": format,
            "openingBalance": opening,
            "closingBalance": opening + total_receipts - total_payments,
            "receipts": receipts,
            "payments": payments,
            "summary": {
                "totalReceipts": total_receipts,
                "totalPayments": total_payments,
                "netCashFlow": total_receipts - total_payments,
            },
            "formatted": layout(date_range, opening, receipts, payments),
        }

    def _single_column(self, date_range, opening, receipts, payments) -> dict:
        rows = [{**r, "type": "Receipt"} for r in receipts]
        rows += [{**p, "type": "Payment"} for p in payments]
        rows.sort(key=lambda row: row["date"])
        return {"transactions": rows}

    def _three_column(self, date_range, opening, receipts, payments) -> dict:
        days = sorted({r["date"] for r in receipts} | {p["date"] for p in payments})
        balance = opening
        transactions = []
        for day in days:
            day_receipts = [r for r in receipts if r["date"] == day]
            day_payments = [p for p in payments if p["date"] == day]
            receipt_total = total(day_receipts, "amount")
            payment_total = total(day_payments, "amount")
            balance = balance + receipt_total - payment_total
            transactions.append({
                "date": day,
                "receipts": day_receipts,
                "payments": day_payments,
                "receiptTotal": receipt_total,
                "paymentTotal": payment_total,
                "balance": balance,
            })
        return {"transactions": transactions}

    def _classified(self, date_range, opening, receipts, payments) -> dict:
        def by_head(rows: list[dict]) -> list[dict]:
            heads: dict[str, list[dict]] = {}
            for row in rows:
                heads.setdefault(row["ledgerType"], []).append({
                    "date": row["date"],
                    "voucherNumber": row["voucherNumber"],
                    "particulars": row["particulars"],
                    "amount": row["amount"],
                })
            return [
                {"ledgerType": head, "transactions": items, "total": total(items, "amount")}
                for head, items in heads.items()
            ]

        return {"receiptsByHead": by_head(receipts), "paymentsByHead": by_head(payments)}

    def _three_column_ledgerwise(self, date_range, opening, receipts, payments) -> dict:
        """Upto / during / end-of-period triads per ledger, by nature."""
        ledgers = self.ledger_repo.list_ledgers(status=LedgerStatus.ACTIVE.value)
        rows = []
        for activity in self.balances.ledger_activities(ledgers, date_range):
            ledger_opening = activity.opening_balance
            receipt_upto = payment_upto = ZERO
            if activity.debit_nature:
                if ledger_opening >= 0:
                    payment_upto = ledger_opening
                else:
                    receipt_upto = abs(ledger_opening)
            else:
                if ledger_opening >= 0:
                    receipt_upto = ledger_opening
                else:
                    payment_upto = abs(ledger_opening)
            receipt_during = activity.total_credits
            payment_during = activity.total_debits

            if not (receipt_upto or receipt_during or payment_upto or payment_during):
                continue

            ledger = activity.ledger
            rows.append({
                "ledgerId": ledger.id,
                "ledgerName": ledger.name,
                "ledgerType": ledger.ledger_type,
                "category": self.balances.classifier.get_category(ledger.ledger_type).value,
                "receipt": {
                    "uptoMonth": receipt_upto,
                    "duringMonth": receipt_during,
                    "endOfMonth": receipt_upto + receipt_during,
                },
                "payment": {
                    "uptoMonth": payment_upto,
                    "duringMonth": payment_during,
                    "endOfMonth": payment_upto + payment_during,
                },
            })

        sections = group_sections(
            rows, _sum_triads, order=tuple(LEDGERWISE_SECTIONS), names=LEDGERWISE_SECTIONS
        )
        return {"sections": sections, "grandTotal": _sum_triads(rows)}

    def _single_column_monthly(self, date_range, opening, receipts, payments) -> dict:
        """During-period movement only: credits are receipts, debits payments."""
        ledgers = self.ledger_repo.list_ledgers(status=LedgerStatus.ACTIVE.value)
        rows = []
        for activity in self.balances.ledger_activities(ledgers, date_range):
            if not activity.has_period_activity:
                continue
            ledger = activity.ledger
            rows.append({
                "ledgerId": ledger.id,
                "ledgerName": ledger.name,
                "ledgerType": ledger.ledger_type,
                "category": self.balances.classifier.get_category(ledger.ledger_type).value,
                "receipt": activity.total_credits,
                "payment": activity.total_debits,
            })

        def section_of(row: dict) -> str:
            if row["ledgerType"] == LedgerType.BANK:
                return "BANK"
            if row["category"] == "LIABILITIES":
                return "LIABILITY"
            if row["category"] == "ASSETS":
                return "ASSET"
            return "EXPENSE"

        sections = group_sections(
            rows, _sum_pairs, section_of=section_of,
            order=tuple(MONTHLY_SECTIONS), names=MONTHLY_SECTIONS,
        )
        return {"sections": sections, "grandTotal": _sum_pairs(rows)}
