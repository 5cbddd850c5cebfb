"""
API Routers - GST invoices feeding GSTR-1 and GSTR-2.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from ledgerbook.application.dto.accounting_dto import InvoiceCreateDTO, InvoiceResponseDTO
from ledgerbook.domain.value_objects import InvoiceDirection, SupplyKind
from ledgerbook.infrastructure.database import get_db
from ledgerbook.infrastructure.database.models import Invoice, InvoiceLine

router = APIRouter(prefix="/api/v1", tags=["GST Invoices"])


@router.post("/invoices", response_model=InvoiceResponseDTO, status_code=status.HTTP_201_CREATED)
def create_invoice(dto: InvoiceCreateDTO, db: Session = Depends(get_db)):
    if dto.direction not in (d.value for d in InvoiceDirection):
        raise HTTPException(status_code=400, detail=f"Invalid direction: {dto.direction}")
    if dto.supply_kind not in (k.value for k in SupplyKind):
        raise HTTPException(status_code=400, detail=f"Invalid supply kind: {dto.supply_kind}")

    invoice = Invoice(**dto.model_dump(exclude={"lines"}))
    db.add(invoice)
    db.flush()

    for idx, line in enumerate(dto.lines, start=1):
        db.add(InvoiceLine(invoice_id=invoice.id, line_number=idx, **line.model_dump()))

    db.commit()
    db.refresh(invoice)
    return InvoiceResponseDTO.model_validate(invoice)


@router.get("/invoices", response_model=list[InvoiceResponseDTO])
def list_invoices(
    direction: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    query = db.query(Invoice).options(selectinload(Invoice.lines))
    if direction:
        query = query.filter(Invoice.direction == direction)
    if start_date:
        query = query.filter(Invoice.invoice_date >= start_date)
    if end_date:
        query = query.filter(Invoice.invoice_date <= end_date)
    rows = query.order_by(Invoice.invoice_date.desc()).offset(skip).limit(limit).all()
    return [InvoiceResponseDTO.model_validate(r) for r in rows]
