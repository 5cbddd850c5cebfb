"""
Main FastAPI application - ledger balances and statutory reports.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ledgerbook.api.routers import inventory, invoices, reports, vouchers
from ledgerbook.core.config import get_settings
from ledgerbook.core.exceptions import DataIntegrityError, InvalidInputError, NotFoundError
from ledgerbook.core.logging import setup_logging
from ledgerbook.infrastructure.database import init_db

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan - startup and shutdown events."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    init_db()
    logger.info("Ledgerbook API %s started", VERSION)
    yield
    logger.info("Ledgerbook API stopped")


app = FastAPI(
    title="Ledgerbook API",
    description="""
## Ledger balances and report assembly

### Reports:
- **Cash book, general ledger, party statement** with running balances
- **Ledger abstract and trial balance** grouped by ledger category
- **Receipts & disbursement** in five layouts
- **Day book** with cash and bank opening/closing
- **Stock register** by day, month or range
- **GSTR-1 / GSTR-2** summaries

### Rules:
- Every voucher balances: total debit = total credit
- Opening balance at a date = ledger baseline + all postings before it
- Balances are reported as a magnitude with a Dr/Cr side
    """,
    version=VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(vouchers.router)
app.include_router(inventory.router)
app.include_router(invoices.router)
app.include_router(reports.router)


@app.get("/")
def root():
    return {
        "name": "Ledgerbook API",
        "version": VERSION,
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "database": "connected"}


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(DataIntegrityError)
async def data_integrity_handler(request: Request, exc: DataIntegrityError):
    """Stored data breaks double entry; the report is not produced."""
    logger.error("Data integrity failure on %s: %s", request.url.path, exc)
    content = {"detail": str(exc)}
    if exc.voucher_number:
        content["voucherNumber"] = exc.voucher_number
    return JSONResponse(status_code=422, content=content)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
