"""
API Routers - Stock items and stock movements.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ledgerbook.application.dto.accounting_dto import (
    ItemCreateDTO,
    ItemResponseDTO,
    StockTransactionCreateDTO,
    StockTransactionResponseDTO,
)
from ledgerbook.domain.value_objects import StockReferenceType, StockTransactionType
from ledgerbook.infrastructure.database import get_db
from ledgerbook.infrastructure.database.models import Item, StockTransaction

router = APIRouter(prefix="/api/v1", tags=["Inventory"])

MOVEMENT_REFERENCES = (
    StockReferenceType.PURCHASE.value,
    StockReferenceType.SALE.value,
    StockReferenceType.ADJUSTMENT.value,
    StockReferenceType.RETURN.value,
)


@router.post("/items", response_model=ItemResponseDTO, status_code=status.HTTP_201_CREATED)
def create_item(dto: ItemCreateDTO, db: Session = Depends(get_db)):
    """
    Create a stock item.

    A non-zero opening quantity is also recorded as an `Opening` Stock In
    transaction; the stock register skips it and starts from the item's
    opening balance.
    """
    if db.query(Item).filter(Item.item_code == dto.item_code).count():
        raise HTTPException(status_code=400, detail=f"Item code already exists: {dto.item_code}")

    item = Item(**dto.model_dump(), current_balance=dto.opening_balance)
    db.add(item)
    db.flush()

    if dto.opening_balance > 0:
        db.add(StockTransaction(
            item_id=item.id,
            transaction_type=StockTransactionType.STOCK_IN.value,
            reference_type=StockReferenceType.OPENING.value,
            transaction_date=date.today(),
            quantity=dto.opening_balance,
            rate=dto.purchase_rate,
            notes="Opening stock",
        ))

    db.commit()
    db.refresh(item)
    return ItemResponseDTO.model_validate(item)


@router.get("/items", response_model=list[ItemResponseDTO])
def list_items(status_filter: str | None = "Active", db: Session = Depends(get_db)):
    query = db.query(Item)
    if status_filter:
        query = query.filter(Item.status == status_filter)
    return [ItemResponseDTO.model_validate(i) for i in query.order_by(Item.item_name).all()]


@router.get("/items/{item_id}", response_model=ItemResponseDTO)
def get_item(item_id: UUID, db: Session = Depends(get_db)):
    item = db.get(Item, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return ItemResponseDTO.model_validate(item)


@router.post(
    "/stock-transactions",
    response_model=StockTransactionResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
def create_stock_transaction(dto: StockTransactionCreateDTO, db: Session = Depends(get_db)):
    """Record a movement and keep the item's current balance in step."""
    if dto.transaction_type not in (t.value for t in StockTransactionType):
        raise HTTPException(status_code=400, detail=f"Invalid transaction type: {dto.transaction_type}")
    if dto.reference_type not in MOVEMENT_REFERENCES:
        raise HTTPException(status_code=400, detail=f"Invalid reference type: {dto.reference_type}")

    item = db.get(Item, dto.item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")

    txn = StockTransaction(**dto.model_dump())
    if dto.transaction_type == StockTransactionType.STOCK_IN.value:
        moved = dto.quantity + dto.free_qty
    else:
        moved = -dto.quantity
    item.current_balance = Decimal(str(item.current_balance or 0)) + moved

    db.add(txn)
    db.add(item)
    db.commit()
    db.refresh(txn)
    return StockTransactionResponseDTO.model_validate(txn)


@router.get("/stock-transactions", response_model=list[StockTransactionResponseDTO])
def list_stock_transactions(
    item_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    query = db.query(StockTransaction)
    if item_id:
        query = query.filter(StockTransaction.item_id == item_id)
    if start_date:
        query = query.filter(StockTransaction.transaction_date >= start_date)
    if end_date:
        query = query.filter(StockTransaction.transaction_date <= end_date)
    rows = query.order_by(StockTransaction.transaction_date.desc()).offset(skip).limit(limit).all()
    return [StockTransactionResponseDTO.model_validate(r) for r in rows]
