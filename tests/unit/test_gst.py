"""
Unit tests - GSTR-1 and GSTR-2 summaries.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.application.reports.gst import GstReturnService
from ledgerbook.domain.value_objects import DateRange

GSTIN = "09AAACS1234F1Z5"


@pytest.fixture
def gst(invoice_repo) -> GstReturnService:
    return GstReturnService(invoice_repo)


@pytest.fixture
def outward(invoice_repo, invoice_factory):
    day = date(2024, 4, 10)
    for invoice in [
        invoice_factory("S1", day, cgst="90", sgst="90", party_gstin=GSTIN, place_of_supply="09-UP"),
        invoice_factory("S2", day, taxable="300000", igst="54000", place_of_supply="07-Delhi"),
        invoice_factory("S3", day, taxable="1000", igst="180", place_of_supply="07-Delhi"),
        invoice_factory("S4", day, taxable="2000", cgst="180", sgst="180", place_of_supply="09-UP"),
        invoice_factory("S5", day, taxable="500", rate="0"),
        invoice_factory("CN1", day, taxable="100", cgst="9", sgst="9", invoice_type="Sale Return",
                        party_gstin=GSTIN),
    ]:
        invoice_repo.add(invoice)


class TestGstr1:

    def test_sections(self, gst, outward, april):
        sections = gst.gstr1(april)["sections"]

        def numbers(rows):
            return [r["invoiceNumber"] for r in rows]

        assert numbers(sections["b2b"]["invoices"]) == ["S1"]
        assert numbers(sections["b2cl"]["invoices"]) == ["S2"]
        assert numbers(sections["b2cs"]["invoices"]) == ["S3", "S4"]
        assert numbers(sections["nilRated"]["supplies"]) == ["S5"]
        assert numbers(sections["cdnr"]["invoices"]) == ["CN1"]

    def test_b2cl_needs_value_above_threshold(self, gst, invoice_repo, invoice_factory, april):
        invoice_repo.add(invoice_factory("S9", date(2024, 4, 2), taxable="200000", igst="36000"))
        sections = gst.gstr1(april)["sections"]
        # 236000 is below the 2.5 lakh limit
        assert [r["invoiceNumber"] for r in sections["b2cs"]["invoices"]] == ["S9"]

    def test_b2cs_grouped_by_place_and_rate(self, gst, outward, april):
        grouped = gst.gstr1(april)["sections"]["b2cs"]["grouped"]
        assert [(g["placeOfSupply"], g["invoiceCount"]) for g in grouped] == [("07-Delhi", 1), ("09-UP", 1)]
        assert grouped[1]["taxableValue"] == Decimal("2000")

    def test_grand_total_nets_notes(self, gst, outward, april):
        result = gst.gstr1(april)
        grand = result["grandTotal"]
        assert grand["invoiceCount"] == 5
        assert grand["taxableValue"] == Decimal("1000") + Decimal("300000") + Decimal("1000") + Decimal("2000") + Decimal("500") - Decimal("100")
        assert grand["cgst"] == Decimal("90") + Decimal("180") - Decimal("9")
        assert result["sections"]["nilRated"]["summary"]["nilRated"] == Decimal("500")

    def test_period_filter(self, gst, outward):
        may = DateRange.for_days(date(2024, 5, 1), date(2024, 5, 31))
        result = gst.gstr1(may)
        assert result["grandTotal"]["invoiceCount"] == 0
        assert result["returnPeriod"]["periodString"] == "01/05/2024 - 31/05/2024"


class TestGstr2:

    @pytest.fixture
    def inward(self, invoice_repo, invoice_factory):
        day = date(2024, 4, 12)
        for invoice in [
            invoice_factory("P1", day, "INWARD", cgst="90", sgst="90", party_gstin=GSTIN),
            invoice_factory("P2", day, "INWARD", cgst="90", sgst="90"),
            invoice_factory("P3", day, "INWARD", igst="180", is_import=True),
            invoice_factory("P4", day, "INWARD", igst="180", is_import=True, supply_kind="SERVICES"),
            invoice_factory("P5", day, "INWARD", rate="0"),
            invoice_factory("P6", day, "INWARD", cgst="50", sgst="50", party_gstin=GSTIN,
                            itc_eligible=False, itc_reason="Blocked credit"),
            invoice_factory("DN1", day, "INWARD", taxable="100", cgst="9", sgst="9",
                            invoice_type="Purchase Return", party_gstin=GSTIN),
        ]:
            invoice_repo.add(invoice)

    def test_sections(self, gst, inward, april):
        sections = gst.gstr2(april)["sections"]

        def numbers(key):
            return [r["invoiceNumber"] for r in sections[key].get("invoices", sections[key].get("supplies"))]

        assert numbers("b2b") == ["P1", "P6"]
        assert numbers("b2bur") == ["P2"]
        assert numbers("importGoods") == ["P3"]
        assert numbers("importServices") == ["P4"]
        assert numbers("nilRated") == ["P5"]
        assert numbers("cdnr") == ["DN1"]

    def test_itc_summary(self, gst, inward, april):
        itc = gst.gstr2(april)["itcSummary"]

        assert itc["eligible"]["cgst"] == Decimal("180")
        assert itc["ineligible"]["cgst"] == Decimal("50")
        assert itc["availed"]["cgst"] == Decimal("180")
        assert itc["availed"]["igst"] == Decimal("360")
        assert itc["reversed"]["cgst"] == Decimal("9")
        assert itc["net"]["cgst"] == Decimal("171")
        assert itc["net"]["total"] == Decimal("171") + Decimal("171") + Decimal("360")

    def test_blocked_credit_not_eligible(self, gst, invoice_repo, invoice_factory, april):
        invoice_repo.add(invoice_factory(
            "P9", date(2024, 4, 12), "INWARD", cgst="50", sgst="50", party_gstin=GSTIN,
            itc_eligible=False, itc_reason="Blocked credit",
        ))

        itc = gst.gstr2(april)["itcSummary"]

        assert itc["eligible"]["total"] == Decimal("0")
        assert itc["availed"]["total"] == Decimal("0")
        assert itc["ineligible"]["total"] == Decimal("100")

    def test_ineligible_row(self, gst, inward, april):
        rows = gst.gstr2(april)["sections"]["b2b"]["invoices"]
        blocked = rows[1]
        assert blocked["itcEligible"] is False
        assert blocked["itcCgst"] == Decimal("0")
        assert blocked["itcReason"] == "Blocked credit"
