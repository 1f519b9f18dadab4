"""Unit tests for the receipt ledger."""

import itertools
import logging
from decimal import Decimal

import pytest

from careledger.errors import ErrorCode
from careledger.ledger import apply_receipt, remove_receipt, summarize_ledger
from careledger.models import PaymentMethod, ReceiptType


@pytest.fixture
def write_off(make_receipt):
    """A 200.00 write-off against inv-1."""
    return make_receipt(
        id="w1",
        receipt_type=ReceiptType.WRITE_OFF,
        amount_incl_gst="200.00",
        payment_method=None,
    )


class TestApplyReceipt:
    """Test recording payments and write-offs."""

    def test_payment_reduces_outstanding(self, sample_invoice, make_receipt):
        """Test a 300.00 payment leaves 200.00 outstanding."""
        invoice = apply_receipt(sample_invoice, make_receipt()).unwrap()

        assert invoice.paid_incl_gst == Decimal("300.00")
        assert invoice.outstanding_incl_gst == Decimal("200.00")
        assert sample_invoice.receipts == []

    def test_write_off_settles_remainder(self, sample_invoice, make_receipt, write_off):
        """Test payment plus write-off brings the balance to zero."""
        invoice = apply_receipt(sample_invoice, make_receipt()).unwrap()
        invoice = apply_receipt(invoice, write_off).unwrap()

        assert invoice.written_off_incl_gst == Decimal("200.00")
        assert invoice.outstanding_incl_gst == Decimal("0.00")

    @pytest.mark.parametrize("amount", ["0.00", "-10.00"])
    def test_non_positive_amount_rejected(self, sample_invoice, make_receipt, amount):
        """Test zero and negative receipts are NegativeReceipt."""
        result = apply_receipt(sample_invoice, make_receipt(amount_incl_gst=amount))

        assert not result.is_valid()
        assert result.report.codes() == [ErrorCode.NEGATIVE_RECEIPT]

    def test_receipt_for_other_invoice_rejected(self, sample_invoice, make_receipt):
        """Test receipts must name the invoice they are applied to."""
        result = apply_receipt(sample_invoice, make_receipt(invoice_id="inv-2"))

        assert result.report.fields() == ["invoice_id"]

    def test_other_method_needs_description(self, sample_invoice, make_receipt):
        """Test payment method Other requires other_payment_method."""
        result = apply_receipt(
            sample_invoice, make_receipt(payment_method=PaymentMethod.OTHER)
        )

        assert result.report.fields() == ["other_payment_method"]
        assert result.report.codes() == [ErrorCode.MISSING_FIELD]

    def test_other_method_with_description(self, sample_invoice, make_receipt):
        """Test a described Other method is accepted."""
        receipt = make_receipt(
            payment_method=PaymentMethod.OTHER, other_payment_method="Cheque"
        )

        assert apply_receipt(sample_invoice, receipt).is_valid()

    def test_write_off_method_is_dropped(self, sample_invoice, make_receipt):
        """Test a write-off's payment method is removed with a warning."""
        receipt = make_receipt(
            receipt_type=ReceiptType.WRITE_OFF, payment_method=PaymentMethod.CASH
        )

        result = apply_receipt(sample_invoice, receipt)

        assert result.unwrap().receipts[0].payment_method is None
        assert result.report.warning_count == 1

    def test_same_receipt_replaces_stored_copy(self, sample_invoice, make_receipt):
        """Test re-delivering a receipt id does not double count it."""
        invoice = apply_receipt(sample_invoice, make_receipt()).unwrap()

        result = apply_receipt(invoice, make_receipt(amount_incl_gst="350.00"))

        assert result.unwrap().paid_incl_gst == Decimal("350.00")
        assert len(result.unwrap().receipts) == 1
        assert result.report.warning_count == 1

    def test_over_allocation_is_kept_and_logged(
        self, sample_invoice, make_receipt, caplog
    ):
        """Test over-payment keeps the negative balance and warns."""
        with caplog.at_level(logging.WARNING):
            result = apply_receipt(
                sample_invoice, make_receipt(amount_incl_gst="550.00")
            )

        invoice = result.unwrap()
        assert invoice.outstanding_incl_gst == Decimal("-50.00")
        assert invoice.is_over_allocated
        assert result.report.get_warnings()[0].field == "outstanding_incl_gst"
        assert "over-allocated" in caplog.text

    def test_order_independence(self, sample_invoice, make_receipt, write_off):
        """Test every order of the same receipts gives the same balances."""
        receipts = [
            make_receipt(id="r1", amount_incl_gst="100.00"),
            make_receipt(id="r2", amount_incl_gst="150.00"),
            write_off,
        ]

        balances = set()
        for order in itertools.permutations(receipts):
            invoice = sample_invoice
            for receipt in order:
                invoice = apply_receipt(invoice, receipt).unwrap()
            balances.add(
                (
                    invoice.paid_incl_gst,
                    invoice.written_off_incl_gst,
                    invoice.outstanding_incl_gst,
                )
            )

        assert balances == {
            (Decimal("250.00"), Decimal("200.00"), Decimal("50.00"))
        }

    def test_standard_invoice_receipt_carries_gst_share(
        self, sample_invoice, make_receipt
    ):
        """Test a 300.00 receipt on a 10% invoice splits 272.73 + 27.27."""
        invoice = apply_receipt(sample_invoice, make_receipt()).unwrap()

        receipt = invoice.receipts[0]
        assert receipt.amount_excl_gst == Decimal("272.73")
        assert receipt.amount_gst == Decimal("27.27")

    def test_gst_free_invoice_receipt_carries_no_gst(
        self, sample_invoice, make_receipt
    ):
        """Test receipts on a GST-free invoice reduce the excl balance in full."""
        line = sample_invoice.lines[0].model_copy(
            update={"amount_excl_gst": Decimal("500.00"), "amount_gst": Decimal("0.00")}
        )
        gst_free = sample_invoice.model_copy(update={"lines": [line]})

        invoice = apply_receipt(gst_free, make_receipt()).unwrap()

        assert invoice.receipts[0].amount_gst == Decimal("0.00")
        assert invoice.paid_excl_gst == Decimal("300.00")
        assert invoice.outstanding_excl_gst == Decimal("200.00")


class TestRemoveReceipt:
    """Test removing receipts."""

    def test_remove_restores_balance(self, sample_invoice, make_receipt):
        """Test removing the only payment restores the full balance."""
        invoice = apply_receipt(sample_invoice, make_receipt()).unwrap()

        invoice = remove_receipt(invoice, "r1").unwrap()

        assert invoice.outstanding_incl_gst == Decimal("500.00")
        assert invoice.receipts == []

    def test_remove_out_of_order(self, sample_invoice, make_receipt, write_off):
        """Test removing an earlier receipt resums the rest."""
        invoice = sample_invoice
        for receipt in (make_receipt(), write_off):
            invoice = apply_receipt(invoice, receipt).unwrap()

        invoice = remove_receipt(invoice, "r1").unwrap()

        assert invoice.paid_incl_gst == Decimal("0.00")
        assert invoice.outstanding_incl_gst == Decimal("300.00")

    def test_remove_unknown_receipt(self, sample_invoice):
        """Test removing an unknown receipt is MissingField."""
        result = remove_receipt(sample_invoice, "r9")

        assert result.report.fields() == ["receipt_id"]
        assert result.report.codes() == [ErrorCode.MISSING_FIELD]


class TestSummarizeLedger:
    """Test ledger summaries."""

    def test_summary_counts(self, sample_invoice, make_receipt, write_off):
        """Test counts and balances of a mixed ledger."""
        invoice = apply_receipt(sample_invoice, make_receipt()).unwrap()
        invoice = apply_receipt(invoice, write_off).unwrap()

        summary = summarize_ledger(invoice)

        assert summary.invoice_id == "inv-1"
        assert summary.payment_count == 1
        assert summary.write_off_count == 1
        assert summary.display_outstanding_incl_gst == Decimal("0.00")
        assert not summary.is_over_allocated
