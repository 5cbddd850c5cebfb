"""
GST return summaries: GSTR-1 (outward supplies) and GSTR-2 (inward
supplies with input tax credit).
"""

import logging
from decimal import Decimal

from ledgerbook.domain.entities import Invoice
from ledgerbook.domain.services import IInvoiceRepository
from ledgerbook.domain.value_objects import ZERO, DateRange, InvoiceDirection, SupplyKind

logger = logging.getLogger(__name__)

# Unregistered inter-state invoices above this value are reported invoice-wise
B2CL_THRESHOLD = Decimal("250000")

RETURN_TYPES = ("Sale Return", "Purchase Return")

AMOUNT_KEYS = ("taxableValue", "cgst", "sgst", "igst", "cess", "invoiceValue")


def _is_return(invoice: Invoice) -> bool:
    return invoice.invoice_type in RETURN_TYPES


def invoice_row(invoice: Invoice) -> dict:
    return {
        "invoiceId": invoice.id,
        "invoiceNumber": invoice.invoice_number,
        "invoiceDate": invoice.invoice_date,
        "invoiceType": invoice.invoice_type,
        "partyName": invoice.party_name,
        "gstin": invoice.party_gstin,
        "placeOfSupply": invoice.place_of_supply,
        "taxableValue": invoice.taxable_value,
        "cgst": invoice.cgst,
        "sgst": invoice.sgst,
        "igst": invoice.igst,
        "cess": ZERO,
        "totalTax": invoice.total_tax,
        "invoiceValue": invoice.invoice_value,
    }


def inward_row(invoice: Invoice) -> dict:
    row = invoice_row(invoice)
    eligible = invoice.itc_eligible
    row.update({
        "supplierName": invoice.party_name,
        "state": invoice.place_of_supply,
        "itcEligible": eligible,
        "itcCgst": invoice.cgst if eligible else ZERO,
        "itcSgst": invoice.sgst if eligible else ZERO,
        "itcIgst": invoice.igst if eligible else ZERO,
        "itcReason": invoice.itc_reason,
    })
    return row


def summarize(rows: list[dict]) -> dict:
    summary = {"count": len(rows)}
    for key in AMOUNT_KEYS:
        summary[key] = sum((row[key] for row in rows), ZERO)
    return summary


def section(title: str, description: str, rows: list[dict]) -> dict:
    return {
        "title": title,
        "description": description,
        "invoices": rows,
        "summary": summarize(rows),
    }


def return_period(date_range: DateRange) -> dict:
    return {
        "startDate": date_range.start_date,
        "endDate": date_range.end_date,
        "periodString": (
            f"{date_range.first_day:%d/%m/%Y} - {date_range.last_day:%d/%m/%Y}"
        ),
    }


def grand_total(invoices: list[dict], notes: list[dict]) -> dict:
    """Totals over all supplies, net of credit and debit notes."""
    totals = {"invoiceCount": len(invoices)}
    for key in ("taxableValue", "cgst", "sgst", "igst", "cess", "totalTax", "invoiceValue"):
        gross = sum((row[key] for row in invoices), ZERO)
        totals[key] = gross - sum((row[key] for row in notes), ZERO)
    return totals


def _tax_split(cgst: Decimal, sgst: Decimal, igst: Decimal) -> dict:
    return {"cgst": cgst, "sgst": sgst, "igst": igst, "total": cgst + sgst + igst}


class GstReturnService:

    def __init__(self, invoice_repo: IInvoiceRepository):
        self.invoice_repo = invoice_repo

    def gstr1(self, date_range: DateRange) -> dict:
        invoices = self.invoice_repo.list_invoices(InvoiceDirection.OUTWARD.value, date_range)

        b2b, b2cl, b2cs, nil_rated, notes = [], [], [], [], []
        b2cs_invoices: list[Invoice] = []
        for invoice in invoices:
            row = invoice_row(invoice)
            if _is_return(invoice):
                notes.append(row)
            elif invoice.total_tax == 0:
                nil_rated.append(row)
            elif invoice.is_registered:
                b2b.append(row)
            elif invoice.is_inter_state and invoice.invoice_value > B2CL_THRESHOLD:
                b2cl.append(row)
            else:
                b2cs.append(row)
                b2cs_invoices.append(invoice)

        supplies = b2b + b2cl + b2cs + nil_rated
        logger.info("GSTR-1 %s: %d invoices, %d notes", date_range.first_day, len(supplies), len(notes))
        return {
            "returnPeriod": return_period(date_range),
            "sections": {
                "b2b": section(
                    "B2B Invoices", "Supplies to registered persons", b2b,
                ),
                "b2cl": section(
                    "B2C Large", "Inter-state supplies to unregistered persons above "
                    f"{B2CL_THRESHOLD}", b2cl,
                ),
                "b2cs": {
                    **section("B2C Small", "Other supplies to unregistered persons", b2cs),
                    "grouped": self._group_b2cs(b2cs_invoices),
                },
                "nilRated": {
                    "title": "Nil Rated Supplies",
                    "description": "Nil rated, exempted and non-GST supplies",
                    "supplies": nil_rated,
                    "summary": {
                        **summarize(nil_rated),
                        "nilRated": sum((r["taxableValue"] for r in nil_rated), ZERO),
                    },
                },
                "cdnr": section("Credit / Debit Notes", "Sales returns", notes),
            },
            "grandTotal": grand_total(supplies, notes),
        }

    @staticmethod
    def _group_b2cs(invoices: list[Invoice]) -> list[dict]:
        """Lines grouped by (place of supply, rate)."""
        groups: dict[tuple, dict] = {}
        for invoice in invoices:
            for line in invoice.lines:
                key = (invoice.place_of_supply, line.gst_percent)
                group = groups.setdefault(key, {
                    "placeOfSupply": invoice.place_of_supply,
                    "gstRate": line.gst_percent,
                    "taxableValue": ZERO,
                    "cgst": ZERO,
                    "sgst": ZERO,
                    "igst": ZERO,
                    "cess": ZERO,
                    "invoiceIds": set(),
                })
                group["taxableValue"] += line.taxable_value
                group["cgst"] += line.cgst
                group["sgst"] += line.sgst
                group["igst"] += line.igst
                group["invoiceIds"].add(invoice.id)

        grouped = []
        for key in sorted(groups, key=lambda k: (k[0] or "", k[1])):
            group = groups[key]
            group["invoiceCount"] = len(group.pop("invoiceIds"))
            grouped.append(group)
        return grouped

    def gstr2(self, date_range: DateRange) -> dict:
        invoices = self.invoice_repo.list_invoices(InvoiceDirection.INWARD.value, date_range)

        b2b, b2bur, import_goods, import_services, nil_rated, notes = [], [], [], [], [], []
        for invoice in invoices:
            row = inward_row(invoice)
            if _is_return(invoice):
                notes.append(row)
            elif invoice.is_import:
                if invoice.supply_kind == SupplyKind.SERVICES.value:
                    import_services.append(row)
                else:
                    import_goods.append(row)
            elif invoice.total_tax == 0:
                nil_rated.append(row)
            elif invoice.is_registered:
                b2b.append(row)
            else:
                b2bur.append(row)

        supplies = b2b + b2bur + import_goods + import_services + nil_rated
        logger.info("GSTR-2 %s: %d invoices, %d notes", date_range.first_day, len(supplies), len(notes))
        return {
            "returnPeriod": return_period(date_range),
            "sections": {
                "b2b": section("B2B Invoices", "Inward supplies from registered suppliers", b2b),
                "b2bur": section(
                    "B2B Unregistered", "Inward supplies from unregistered suppliers", b2bur,
                ),
                "importGoods": section("Import of Goods", "Goods imported from outside India", import_goods),
                "importServices": section(
                    "Import of Services", "Services received from outside India", import_services,
                ),
                "nilRated": {
                    "title": "Nil Rated Supplies",
                    "description": "Nil rated, exempted and non-GST inward supplies",
                    "supplies": nil_rated,
                    "summary": {
                        **summarize(nil_rated),
                        "nilRated": sum((r["taxableValue"] for r in nil_rated), ZERO),
                    },
                },
                "cdnr": section("Credit / Debit Notes", "Purchase returns", notes),
            },
            "itcSummary": self._itc_summary(supplies, notes),
            "grandTotal": grand_total(supplies, notes),
        }

    @staticmethod
    def _itc_summary(supplies: list[dict], notes: list[dict]) -> dict:
        """Eligible ITC is tax on supplies that carry credit; blocked tax
        is reported apart as ineligible."""
        def tax_of(rows: list[dict], prefix: str = "") -> dict:
            keys = ("itcCgst", "itcSgst", "itcIgst") if prefix else ("cgst", "sgst", "igst")
            return _tax_split(*(sum((r[k] for r in rows), ZERO) for k in keys))

        eligible = tax_of([r for r in supplies if r["itcEligible"]])
        ineligible = tax_of([r for r in supplies if not r["itcEligible"]])
        availed = tax_of(supplies, "itc")
        reversed_ = tax_of(notes, "itc")
        net = _tax_split(
            availed["cgst"] - reversed_["cgst"],
            availed["sgst"] - reversed_["sgst"],
            availed["igst"] - reversed_["igst"],
        )
        return {
            "eligible": eligible,
            "ineligible": ineligible,
            "availed": availed,
            "reversed": reversed_,
            "net": net,
        }
