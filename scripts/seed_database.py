#!/usr/bin/env python3
"""
Database Seeding Script - Ledgerbook
Seed demo ledgers, vouchers, stock and GST invoices for manual testing
"""

import csv
import os
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

SEED_DIR = Path(__file__).parent / "seed_data"


def read_csv(filepath: str) -> list[dict]:
    """Read a CSV seed file; a missing file seeds nothing."""
    if not os.path.exists(filepath):
        return []
    data = []
    with open(filepath, "r", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            data.append(row)
    return data


def main():
    """Main function."""
    print("=" * 60)
    print("Database Seeding - Ledgerbook")
    print("=" * 60)

    from ledgerbook.core.logging import setup_logging
    from ledgerbook.infrastructure.database import SessionLocal, init_db

    setup_logging()
    init_db()

    from ledgerbook.infrastructure.database.models import (
        Invoice,
        InvoiceLine,
        Item,
        Ledger,
        StockTransaction,
        Voucher,
        VoucherEntry,
    )

    db = SessionLocal()
    today = date.today()
    month_start = today.replace(day=1)

    try:
        # Seed ledgers
        ledgers_data = read_csv(str(SEED_DIR / "01_ledgers.csv"))
        print(f"\n📦 Seeding {len(ledgers_data)} ledgers...")

        ledgers = {}
        for row in ledgers_data:
            ledger = db.query(Ledger).filter(Ledger.name == row["name"]).first()
            if not ledger:
                ledger = Ledger(
                    name=row["name"],
                    ledger_type=row["ledger_type"],
                    opening_balance=Decimal(row.get("opening_balance") or "0"),
                    parent_group=row.get("parent_group") or None,
                )
                db.add(ledger)
            ledgers[ledger.name] = ledger
        db.commit()
        print(f"✓ Seeded {len(ledgers_data)} ledgers")

        # Seed vouchers: (number, type, day offset, narration, [(ledger, debit, credit)])
        vouchers_data = [
            ("RV/DEMO/001", "Receipt", 0, "Cash sale", [
                ("Cash", "5000.00", "0"), ("Sales", "0", "5000.00"),
            ]),
            ("PV/DEMO/001", "Payment", 1, "Shop rent", [
                ("Rent Expense", "12000.00", "0"), ("State Bank Current A/c", "0", "12000.00"),
            ]),
            ("RV/DEMO/002", "Receipt", 2, "Received from Sharma Traders", [
                ("State Bank Current A/c", "7500.00", "0"), ("Sharma Traders", "0", "7500.00"),
            ]),
            ("JV/DEMO/001", "Journal", 3, "Credit purchase", [
                ("Purchases", "18000.00", "0"), ("Gupta Suppliers", "0", "18000.00"),
            ]),
            ("PV/DEMO/002", "Payment", 4, "Paid to Gupta Suppliers", [
                ("Gupta Suppliers", "10000.00", "0"), ("Cash", "0", "4000.00"),
                ("State Bank Current A/c", "0", "6000.00"),
            ]),
        ]
        print(f"\n📦 Seeding {len(vouchers_data)} vouchers...")

        for number, voucher_type, offset, narration, lines in vouchers_data:
            if db.query(Voucher).filter(Voucher.voucher_number == number).first():
                continue
            voucher = Voucher(
                voucher_number=number,
                voucher_type=voucher_type,
                voucher_date=month_start + timedelta(days=offset),
                narration=narration,
                total_debit=sum(Decimal(d) for _, d, _ in lines),
                total_credit=sum(Decimal(c) for _, _, c in lines),
            )
            db.add(voucher)
            db.flush()
            for idx, (name, debit, credit) in enumerate(lines, start=1):
                db.add(VoucherEntry(
                    voucher_id=voucher.id,
                    line_number=idx,
                    ledger_id=ledgers[name].id,
                    ledger_name=name,
                    debit_amount=Decimal(debit),
                    credit_amount=Decimal(credit),
                ))
        db.commit()
        print(f"✓ Seeded {len(vouchers_data)} vouchers")

        # Seed items and their movements
        items_data = read_csv(str(SEED_DIR / "02_items.csv"))
        print(f"\n📦 Seeding {len(items_data)} items...")

        for row in items_data:
            if db.query(Item).filter(Item.item_code == row["item_code"]).first():
                continue
            opening = Decimal(row.get("opening_balance") or "0")
            item = Item(
                item_code=row["item_code"],
                item_name=row["item_name"],
                unit=row.get("unit") or "Nos",
                category=row.get("category") or None,
                opening_balance=opening,
                current_balance=opening,
                purchase_rate=Decimal(row.get("purchase_rate") or "0"),
                sales_rate=Decimal(row.get("sales_rate") or "0"),
                gst_percent=Decimal(row.get("gst_percent") or "0"),
                hsn_code=row.get("hsn_code") or None,
            )
            db.add(item)
            db.flush()

            movements = [
                ("Stock In", "Opening", month_start, opening),
                ("Stock In", "Purchase", month_start + timedelta(days=1), opening / 2),
                ("Stock Out", "Sale", month_start + timedelta(days=2), opening / 4),
            ]
            for txn_type, ref_type, txn_date, qty in movements:
                if qty <= 0:
                    continue
                db.add(StockTransaction(
                    item_id=item.id,
                    transaction_type=txn_type,
                    reference_type=ref_type,
                    transaction_date=txn_date,
                    quantity=qty,
                    rate=item.purchase_rate,
                ))
                if ref_type != "Opening":
                    item.current_balance += qty if txn_type == "Stock In" else -qty
        db.commit()
        print(f"✓ Seeded {len(items_data)} items")

        # Seed GST invoices
        invoices_data = [
            ("INV/001", "OUTWARD", "Sale", "Sharma Traders", "09AAACS1234F1Z5", "09-Uttar Pradesh",
             "GOODS", False, "40000.00", "5", "1000.00", "1000.00", "0"),
            ("INV/002", "OUTWARD", "Sale", "Walk-in Customer", None, "07-Delhi",
             "GOODS", False, "300000.00", "18", "0", "0", "54000.00"),
            ("INV/003", "OUTWARD", "Sale", "Walk-in Customer", None, "09-Uttar Pradesh",
             "GOODS", False, "2000.00", "18", "180.00", "180.00", "0"),
            ("PUR/001", "INWARD", "Purchase", "Gupta Suppliers", "09AAACG5678K1Z2", "09-Uttar Pradesh",
             "GOODS", False, "18000.00", "5", "450.00", "450.00", "0"),
            ("PUR/002", "INWARD", "Purchase", "Overseas Tools Ltd", None, "96-Other Countries",
             "GOODS", True, "25000.00", "18", "0", "0", "4500.00"),
        ]
        print(f"\n📦 Seeding {len(invoices_data)} invoices...")

        for (number, direction, invoice_type, party, gstin, pos, kind, is_import,
             taxable, rate, cgst, sgst, igst) in invoices_data:
            if db.query(Invoice).filter(Invoice.invoice_number == number).first():
                continue
            invoice = Invoice(
                invoice_number=number,
                invoice_date=month_start + timedelta(days=3),
                direction=direction,
                invoice_type=invoice_type,
                party_name=party,
                party_gstin=gstin,
                place_of_supply=pos,
                supply_kind=kind,
                is_import=is_import,
            )
            db.add(invoice)
            db.flush()
            db.add(InvoiceLine(
                invoice_id=invoice.id,
                line_number=1,
                taxable_value=Decimal(taxable),
                gst_percent=Decimal(rate),
                cgst=Decimal(cgst),
                sgst=Decimal(sgst),
                igst=Decimal(igst),
            ))
        db.commit()
        print(f"✓ Seeded {len(invoices_data)} invoices")

        # Validate
        print("\n=== Validating Seed Data ===")

        unbalanced = [
            v.voucher_number
            for v in db.query(Voucher).all()
            if abs(Decimal(v.total_debit) - Decimal(v.total_credit)) > Decimal("0.01")
        ]
        if unbalanced:
            print(f"⚠️ Unbalanced vouchers: {', '.join(unbalanced)}")
        else:
            print("✓ All vouchers balanced")

        print("\n" + "=" * 60)
        print("Seeding completed successfully!")
        print("=" * 60)

    except Exception as e:
        print(f"\n❌ Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
