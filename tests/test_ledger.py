"""Tests for the account ledger."""

import pytest
from firesim.ledger import Ledger, TAX_DEFERRED, TAX_FREE, UNREGISTERED


class TestDepositTaxDeferred:
    def test_within_headroom(self):
        ledger = Ledger(headroom=10_000)
        assert ledger.deposit_tax_deferred(4_000) == 4_000
        assert ledger.tax_deferred == 4_000
        assert ledger.headroom == 6_000
        assert ledger.unregistered == 0

    def test_excess_redirected_to_unregistered(self):
        ledger = Ledger(headroom=3_000)
        assert ledger.deposit_tax_deferred(5_000) == 3_000
        assert ledger.tax_deferred == 3_000
        assert ledger.unregistered == 2_000
        assert ledger.headroom == 0

    def test_no_headroom(self):
        ledger = Ledger()
        assert ledger.deposit_tax_deferred(1_000) == 0
        assert ledger.unregistered == 1_000

    def test_headroom_never_negative(self):
        ledger = Ledger(headroom=5_000)
        for amount in [1_000, 7_500, 0, 250, 100_000, 3]:
            ledger.deposit_tax_deferred(amount)
            assert ledger.headroom >= 0
        assert ledger.tax_deferred == 5_000
        assert ledger.total() == pytest.approx(1_000 + 7_500 + 250 + 100_000 + 3)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError):
            Ledger(headroom=1_000).deposit_tax_deferred(-1)


class TestOtherDeposits:
    def test_tax_free_uncapped(self):
        ledger = Ledger()
        ledger.deposit_tax_free(250_000)
        assert ledger.tax_free == 250_000

    def test_unregistered(self):
        ledger = Ledger(unregistered=100)
        ledger.deposit_unregistered(50)
        assert ledger.unregistered == 150

    def test_add_headroom(self):
        ledger = Ledger(headroom=1_000)
        ledger.add_headroom(14_400)
        assert ledger.headroom == 15_400


class TestGrow:
    def test_identity(self):
        ledger = Ledger(tax_deferred=15_000, tax_free=24_000, unregistered=1_234.5, headroom=700)
        ledger.grow(1.0)
        assert ledger == Ledger(tax_deferred=15_000, tax_free=24_000, unregistered=1_234.5, headroom=700)

    def test_all_balances_grow(self):
        ledger = Ledger(tax_deferred=100, tax_free=200, unregistered=300, headroom=50)
        ledger.grow(1.07)
        assert ledger.tax_deferred == pytest.approx(107)
        assert ledger.tax_free == pytest.approx(214)
        assert ledger.unregistered == pytest.approx(321)
        assert ledger.headroom == 50  # room is not an investment

    def test_total(self):
        assert Ledger(tax_deferred=1, tax_free=2, unregistered=3).total() == 6


class TestWithdraw:
    def test_drains_in_order(self):
        ledger = Ledger(tax_deferred=10_000, tax_free=10_000, unregistered=5_000)
        withdrawn = ledger.withdraw(8_000, (UNREGISTERED, TAX_FREE, TAX_DEFERRED))
        assert withdrawn == 8_000
        assert ledger.unregistered == 0
        assert ledger.tax_free == 7_000
        assert ledger.tax_deferred == 10_000

    def test_reverse_order(self):
        ledger = Ledger(tax_deferred=10_000, tax_free=10_000, unregistered=5_000)
        ledger.withdraw(8_000, (TAX_DEFERRED, TAX_FREE, UNREGISTERED))
        assert ledger.tax_deferred == 2_000
        assert ledger.tax_free == 10_000

    def test_insufficient_assets(self):
        ledger = Ledger(tax_deferred=1_000, tax_free=500)
        withdrawn = ledger.withdraw(5_000, (UNREGISTERED, TAX_FREE, TAX_DEFERRED))
        assert withdrawn == 1_500
        assert ledger.total() == 0

    def test_empty_ledger(self):
        assert Ledger().withdraw(100, (UNREGISTERED, TAX_FREE, TAX_DEFERRED)) == 0

    def test_unknown_account(self):
        with pytest.raises(KeyError):
            Ledger(tax_free=100).withdraw(50, ("savings",))
