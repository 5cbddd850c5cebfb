"""
API Routers - Ledgers and vouchers.

Write endpoints check the double-entry rules before anything is stored;
reports trust (and re-check) what is stored here.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from ledgerbook.application.dto.accounting_dto import (
    LedgerCreateDTO,
    LedgerResponseDTO,
    VoucherCreateDTO,
    VoucherResponseDTO,
)
from ledgerbook.domain.value_objects import BALANCE_TOLERANCE, LedgerStatus, VoucherType
from ledgerbook.infrastructure.database import get_db
from ledgerbook.infrastructure.database.models import Ledger, Voucher, VoucherEntry

router = APIRouter(prefix="/api/v1", tags=["Ledgers & Vouchers"])

VOUCHER_PREFIXES = {
    VoucherType.RECEIPT.value: "RV",
    VoucherType.PAYMENT.value: "PV",
    VoucherType.JOURNAL.value: "JV",
}


@router.post("/ledgers", response_model=LedgerResponseDTO, status_code=status.HTTP_201_CREATED)
def create_ledger(dto: LedgerCreateDTO, db: Session = Depends(get_db)):
    """Create a ledger; its opening balance is fixed from here on."""
    if dto.status not in (LedgerStatus.ACTIVE.value, LedgerStatus.INACTIVE.value):
        raise HTTPException(status_code=400, detail=f"Invalid ledger status: {dto.status}")

    ledger = Ledger(**dto.model_dump())
    db.add(ledger)
    db.commit()
    db.refresh(ledger)
    return LedgerResponseDTO.model_validate(ledger)


@router.get("/ledgers", response_model=list[LedgerResponseDTO])
def list_ledgers(
    ledger_type: str | None = Query(None, alias="type"),
    status_filter: str | None = Query(LedgerStatus.ACTIVE.value, alias="status"),
    db: Session = Depends(get_db),
):
    """Ledgers for pickers, by name."""
    query = db.query(Ledger)
    if ledger_type:
        query = query.filter(Ledger.ledger_type == ledger_type)
    if status_filter:
        query = query.filter(Ledger.status == status_filter)
    return [LedgerResponseDTO.model_validate(l) for l in query.order_by(Ledger.name).all()]


@router.get("/ledgers/{ledger_id}", response_model=LedgerResponseDTO)
def get_ledger(ledger_id: UUID, db: Session = Depends(get_db)):
    ledger = db.get(Ledger, ledger_id)
    if not ledger:
        raise HTTPException(status_code=404, detail="Ledger not found")
    return LedgerResponseDTO.model_validate(ledger)


def _next_voucher_number(db: Session, voucher_type: str, voucher_date: date) -> str:
    prefix = f"{VOUCHER_PREFIXES.get(voucher_type, 'V')}/{voucher_date:%Y%m%d}/"
    existing = db.query(Voucher).filter(Voucher.voucher_number.like(f"{prefix}%")).count()
    return f"{prefix}{existing + 1:03d}"


@router.post("/vouchers", response_model=VoucherResponseDTO, status_code=status.HTTP_201_CREATED)
def create_voucher(dto: VoucherCreateDTO, db: Session = Depends(get_db)):
    """
    Create a voucher.

    - Every entry carries exactly one of debit or credit
    - Total debit must equal total credit
    - Voucher numbers are unique
    """
    if dto.voucher_type not in VOUCHER_PREFIXES:
        raise HTTPException(status_code=400, detail=f"Invalid voucher type: {dto.voucher_type}")

    for idx, entry in enumerate(dto.entries, start=1):
        if (entry.debit_amount > 0) == (entry.credit_amount > 0):
            raise HTTPException(
                status_code=400,
                detail=f"Entry {idx} must carry exactly one of debit or credit",
            )

    total_debit = sum((e.debit_amount for e in dto.entries), Decimal("0"))
    total_credit = sum((e.credit_amount for e in dto.entries), Decimal("0"))
    if abs(total_debit - total_credit) > BALANCE_TOLERANCE:
        raise HTTPException(
            status_code=400,
            detail=f"Voucher is not balanced: total debit {total_debit}, total credit {total_credit}",
        )

    ledger_ids = {e.ledger_id for e in dto.entries}
    ledgers = {l.id: l for l in db.query(Ledger).filter(Ledger.id.in_(ledger_ids)).all()}
    missing = ledger_ids - set(ledgers)
    if missing:
        raise HTTPException(status_code=404, detail=f"Ledger not found: {sorted(map(str, missing))[0]}")

    voucher_number = dto.voucher_number or _next_voucher_number(db, dto.voucher_type, dto.voucher_date)
    if db.query(Voucher).filter(Voucher.voucher_number == voucher_number).count():
        raise HTTPException(status_code=400, detail=f"Voucher number already exists: {voucher_number}")

    voucher = Voucher(
        voucher_number=voucher_number,
        voucher_type=dto.voucher_type,
        voucher_date=dto.voucher_date,
        narration=dto.narration,
        reference_type=dto.reference_type,
        total_debit=total_debit,
        total_credit=total_credit,
    )
    db.add(voucher)
    db.flush()

    for idx, entry in enumerate(dto.entries, start=1):
        db.add(VoucherEntry(
            voucher_id=voucher.id,
            line_number=idx,
            ledger_id=entry.ledger_id,
            ledger_name=ledgers[entry.ledger_id].name,
            debit_amount=entry.debit_amount,
            credit_amount=entry.credit_amount,
            narration=entry.narration,
        ))

    db.commit()
    db.refresh(voucher)
    return VoucherResponseDTO.model_validate(voucher)


@router.get("/vouchers/{voucher_id}", response_model=VoucherResponseDTO)
def get_voucher(voucher_id: UUID, db: Session = Depends(get_db)):
    voucher = db.get(Voucher, voucher_id)
    if not voucher:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return VoucherResponseDTO.model_validate(voucher)


@router.get("/vouchers", response_model=list[VoucherResponseDTO])
def list_vouchers(
    start_date: date | None = None,
    end_date: date | None = None,
    voucher_type: str | None = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    query = db.query(Voucher).options(selectinload(Voucher.entries))

    if start_date:
        query = query.filter(Voucher.voucher_date >= start_date)
    if end_date:
        query = query.filter(Voucher.voucher_date <= end_date)
    if voucher_type:
        query = query.filter(Voucher.voucher_type == voucher_type)

    vouchers = query.order_by(Voucher.voucher_date.desc(), Voucher.voucher_number.desc()).offset(skip).limit(limit).all()
    return [VoucherResponseDTO.model_validate(v) for v in vouchers]
