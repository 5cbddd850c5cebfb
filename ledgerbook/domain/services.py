"""
Domain Services - store interfaces and the balance engine.

The engine turns an append-only stream of balanced vouchers into
opening, running and closing balances. Every report is assembled from
the LedgerActivity values produced here.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from uuid import UUID

from ledgerbook.core.exceptions import DataIntegrityError

from .classifier import DEFAULT_CLASSIFIER, BalanceClassifier, balance_type
from .entities import Invoice, Item, Ledger, StockTransaction, Voucher, VoucherEntry
from .value_objects import BALANCE_TOLERANCE, ZERO, DateRange

logger = logging.getLogger(__name__)


class ILedgerRepository(ABC):

    @abstractmethod
    def get_by_id(self, ledger_id: UUID) -> Ledger | None:
        ...

    @abstractmethod
    def list_ledgers(
        self,
        ledger_types: Iterable[str] | None = None,
        status: str | None = None,
    ) -> list[Ledger]:
        """Ledgers ordered by name."""
        ...


class IVoucherRepository(ABC):

    @abstractmethod
    def list_vouchers(
        self,
        date_range: DateRange | None = None,
        ledger_ids: Iterable[UUID] | None = None,
        before: date | None = None,
    ) -> list[Voucher]:
        """
        Vouchers ordered by (voucher_date, voucher_number), ties kept in
        retrieval order.

        date_range filters inclusively, before filters voucher_date < before,
        ledger_ids keeps vouchers with at least one entry on those ledgers.
        """
        ...

    def vouchers_by_ledger(
        self,
        ledger_ids: Iterable[UUID],
        date_range: DateRange | None = None,
        before: date | None = None,
    ) -> dict[UUID, list[Voucher]]:
        """Batch read: the vouchers touching each ledger, in voucher order."""
        wanted = list(dict.fromkeys(ledger_ids))
        grouped: dict[UUID, list[Voucher]] = {ledger_id: [] for ledger_id in wanted}
        if not wanted:
            return grouped
        for voucher in self.list_vouchers(date_range=date_range, ledger_ids=wanted, before=before):
            seen: set[UUID] = set()
            for entry in voucher.entries:
                if entry.ledger_id in grouped and entry.ledger_id not in seen:
                    grouped[entry.ledger_id].append(voucher)
                    seen.add(entry.ledger_id)
        return grouped


class IItemRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: UUID) -> Item | None:
        ...

    @abstractmethod
    def list_items(self, status: str | None = None) -> list[Item]:
        """Items ordered by name."""
        ...


class IStockTransactionRepository(ABC):

    @abstractmethod
    def list_transactions(
        self,
        item_ids: Iterable[UUID] | None = None,
        date_range: DateRange | None = None,
        before: date | None = None,
    ) -> list[StockTransaction]:
        """Transactions ordered by date, ties kept in retrieval order."""
        ...


class IInvoiceRepository(ABC):

    @abstractmethod
    def list_invoices(
        self,
        direction: str,
        date_range: DateRange | None = None,
    ) -> list[Invoice]:
        """Invoices ordered by (invoice_date, invoice_number)."""
        ...


def order_vouchers(vouchers: Iterable[Voucher]) -> list[Voucher]:
    """Sort by (voucher_date, voucher_number); sorted() is stable, so
    vouchers sharing both keys keep their retrieval order."""
    return sorted(vouchers, key=lambda v: (v.voucher_date, v.voucher_number))


def cutoff_day(cutoff: date | datetime | None) -> date | None:
    """
    Exclusive day bound equivalent to `voucher_date < cutoff`.

    Voucher dates are whole days, so a datetime cutoff past midnight
    still includes its own day.
    """
    if isinstance(cutoff, datetime):
        if cutoff.time() == time.min:
            return cutoff.date()
        return cutoff.date() + timedelta(days=1)
    if isinstance(cutoff, date):
        return cutoff
    return None


def signed_change(net_change: Decimal, debit_nature: bool) -> Decimal:
    """Effect of (debit - credit) on a balance kept in the ledger's nature."""
    return net_change if debit_nature else -net_change


def closing_balance(
    opening_balance: Decimal,
    total_debits: Decimal,
    total_credits: Decimal,
    debit_nature: bool,
) -> Decimal:
    return opening_balance + signed_change(total_debits - total_credits, debit_nature)


@dataclass(frozen=True)
class LedgerPosting:
    """One entry of a voucher seen from the ledger it posts to."""
    voucher: Voucher
    entry: VoucherEntry

    @property
    def voucher_date(self) -> date:
        return self.voucher.voucher_date

    @property
    def voucher_number(self) -> str:
        return self.voucher.voucher_number

    @property
    def debit_amount(self) -> Decimal:
        return self.entry.debit_amount

    @property
    def credit_amount(self) -> Decimal:
        return self.entry.credit_amount

    @property
    def narration(self) -> str | None:
        return self.entry.narration or self.voucher.narration


@dataclass(frozen=True)
class RunningBalanceStep:
    posting: LedgerPosting
    running_balance: Decimal
    debit_nature: bool

    @property
    def balance(self) -> Decimal:
        return abs(self.running_balance)

    @property
    def balance_type(self) -> str:
        return balance_type(self.running_balance, self.debit_nature)


def postings_for(ledger_id: UUID, vouchers: Iterable[Voucher]) -> list[LedgerPosting]:
    """Entries of `ledger_id`, validated, in the order the vouchers arrive."""
    postings = []
    for voucher in vouchers:
        voucher.validate()
        for entry in voucher.entries:
            if entry.ledger_id == ledger_id:
                postings.append(LedgerPosting(voucher=voucher, entry=entry))
    return postings


def accumulate_running_balance(
    opening_balance: Decimal,
    postings: Iterable[LedgerPosting],
    debit_nature: bool,
) -> list[RunningBalanceStep]:
    running = opening_balance
    steps = []
    for posting in postings:
        running += signed_change(posting.entry.net_change, debit_nature)
        steps.append(RunningBalanceStep(posting, running, debit_nature))
    return steps


@dataclass
class LedgerActivity:
    """Opening, period postings and closing of one ledger over a range."""
    ledger: Ledger
    debit_nature: bool
    opening_balance: Decimal
    postings: list[LedgerPosting] = field(default_factory=list)
    steps: list[RunningBalanceStep] = field(default_factory=list)
    total_debits: Decimal = ZERO
    total_credits: Decimal = ZERO
    closing_balance: Decimal = ZERO

    @property
    def has_period_activity(self) -> bool:
        return self.total_debits != 0 or self.total_credits != 0

    @property
    def opening_type(self) -> str:
        return balance_type(self.opening_balance, self.debit_nature)

    @property
    def closing_type(self) -> str:
        return balance_type(self.closing_balance, self.debit_nature)


class BalanceService:
    """
    Opening Balance Calculator, Running Balance Accumulator and Closing
    Balance Deriver over the ledger and voucher stores.
    """

    def __init__(
        self,
        ledger_repo: ILedgerRepository,
        voucher_repo: IVoucherRepository,
        classifier: BalanceClassifier = DEFAULT_CLASSIFIER,
    ):
        self.ledger_repo = ledger_repo
        self.voucher_repo = voucher_repo
        self.classifier = classifier

    def is_debit_nature(self, ledger: Ledger) -> bool:
        return self.classifier.is_debit_nature(ledger.ledger_type)

    def opening_balance(self, ledger_id: UUID, cutoff: date | datetime | None) -> Decimal:
        """
        Balance of a ledger as of `cutoff` (exclusive).

        Total: an invalid cutoff or an unknown ledger yields 0.
        """
        day = cutoff_day(cutoff)
        if day is None:
            logger.warning("Invalid cutoff %r for opening balance of %s", cutoff, ledger_id)
            return ZERO

        ledger = self.ledger_repo.get_by_id(ledger_id)
        if ledger is None:
            logger.warning("Ledger %s not found while computing opening balance", ledger_id)
            return ZERO

        vouchers = self.voucher_repo.list_vouchers(ledger_ids=[ledger_id], before=day)
        return self._replay(ledger, vouchers)

    def opening_balances(
        self,
        ledgers: Sequence[Ledger],
        cutoff: date | datetime | None,
    ) -> dict[UUID, Decimal]:
        """Batch form of opening_balance over one grouped read."""
        day = cutoff_day(cutoff)
        if day is None:
            logger.warning("Invalid cutoff %r for %d opening balances", cutoff, len(ledgers))
            return {ledger.id: ZERO for ledger in ledgers}

        grouped = self.voucher_repo.vouchers_by_ledger([l.id for l in ledgers], before=day)
        return {
            ledger.id: self._replay(ledger, grouped.get(ledger.id, []))
            for ledger in ledgers
        }

    def _replay(self, ledger: Ledger, vouchers: Iterable[Voucher]) -> Decimal:
        debit_nature = self.is_debit_nature(ledger)
        balance = ledger.opening_balance or ZERO
        for posting in postings_for(ledger.id, vouchers):
            balance += signed_change(posting.entry.net_change, debit_nature)
        return balance

    def build_activity(
        self,
        ledger: Ledger,
        opening: Decimal,
        period_vouchers: Iterable[Voucher],
    ) -> LedgerActivity:
        """Fold period vouchers of one ledger; closing must match the fold."""
        debit_nature = self.is_debit_nature(ledger)
        postings = postings_for(ledger.id, order_vouchers(period_vouchers))
        steps = accumulate_running_balance(opening, postings, debit_nature)
        total_debits = sum((p.debit_amount for p in postings), ZERO)
        total_credits = sum((p.credit_amount for p in postings), ZERO)
        closing = closing_balance(opening, total_debits, total_credits, debit_nature)

        folded = steps[-1].running_balance if steps else opening
        if abs(folded - closing) > BALANCE_TOLERANCE:
            raise DataIntegrityError(
                f"Ledger {ledger.name}: running balance {folded} disagrees "
                f"with derived closing balance {closing}"
            )

        return LedgerActivity(
            ledger=ledger,
            debit_nature=debit_nature,
            opening_balance=opening,
            postings=postings,
            steps=steps,
            total_debits=total_debits,
            total_credits=total_credits,
            closing_balance=closing,
        )

    def ledger_activity(self, ledger: Ledger, date_range: DateRange) -> LedgerActivity:
        opening = self.opening_balance(ledger.id, date_range.start_date)
        vouchers = self.voucher_repo.list_vouchers(date_range=date_range, ledger_ids=[ledger.id])
        return self.build_activity(ledger, opening, vouchers)

    def ledger_activities(
        self,
        ledgers: Sequence[Ledger],
        date_range: DateRange,
    ) -> list[LedgerActivity]:
        """Activity of many ledgers from two grouped reads, in ledger order."""
        openings = self.opening_balances(ledgers, date_range.start_date)
        grouped = self.voucher_repo.vouchers_by_ledger(
            [l.id for l in ledgers], date_range=date_range
        )
        return [
            self.build_activity(ledger, openings.get(ledger.id, ZERO), grouped.get(ledger.id, []))
            for ledger in ledgers
        ]
