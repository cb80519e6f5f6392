"""Tests for the in-memory asset ledger."""

import pytest

from aggregator.errors import InsufficientBalance, InvalidDestination, TransferError
from aggregator.ledger import AssetLedger
from tests.helpers.constants import DAI, ETH, OTHER_TRADER, TRADER, USDC


class TestBalances:
    def test_unknown_balance_is_zero(self, ledger):
        assert ledger.balance_of(TRADER, DAI) == 0

    def test_mint(self, ledger):
        ledger.mint(DAI, TRADER, 100)
        ledger.mint(DAI, TRADER, 50)
        assert ledger.balance_of(TRADER, DAI) == 150
        assert ledger.balance_of(TRADER, USDC) == 0

    def test_case_insensitive_keys(self, ledger):
        ledger.mint(DAI.upper().replace("0X", "0x"), TRADER, 10)
        assert ledger.balance_of(TRADER, DAI) == 10

    def test_native_asset_is_just_another_asset(self, ledger):
        ledger.mint(ETH, TRADER, 10**18)
        ledger.transfer(ETH, TRADER, OTHER_TRADER, 10**17)
        assert ledger.balance_of(OTHER_TRADER, ETH) == 10**17

    def test_mint_rejects_negative(self, ledger):
        with pytest.raises(TransferError):
            ledger.mint(DAI, TRADER, -1)


class TestTransfer:
    """Tests for AssetLedger.transfer."""

    def test_moves_full_amount(self, ledger):
        ledger.mint(DAI, TRADER, 100)
        ledger.transfer(DAI, TRADER, OTHER_TRADER, 60)
        assert ledger.balance_of(TRADER, DAI) == 40
        assert ledger.balance_of(OTHER_TRADER, DAI) == 60

    def test_insufficient_balance_moves_nothing(self, ledger):
        ledger.mint(DAI, TRADER, 100)
        with pytest.raises(InsufficientBalance) as exc_info:
            ledger.transfer(DAI, TRADER, OTHER_TRADER, 101)

        assert exc_info.value.balance == 100
        assert exc_info.value.amount == 101
        assert ledger.balance_of(TRADER, DAI) == 100
        assert ledger.balance_of(OTHER_TRADER, DAI) == 0

    def test_invalid_destination(self, ledger):
        ledger.mint(DAI, TRADER, 100)
        with pytest.raises(InvalidDestination):
            ledger.transfer(DAI, TRADER, "0xnot-an-address", 1)

    def test_negative_amount(self, ledger):
        with pytest.raises(TransferError):
            ledger.transfer(DAI, TRADER, OTHER_TRADER, -5)

    def test_insufficient_balance_is_transfer_error(self):
        assert issubclass(InsufficientBalance, TransferError)


class TestAtomic:
    """Tests for snapshot/rollback."""

    def test_commit(self, ledger):
        ledger.mint(DAI, TRADER, 100)
        with ledger.atomic():
            ledger.transfer(DAI, TRADER, OTHER_TRADER, 30)
        assert ledger.balance_of(OTHER_TRADER, DAI) == 30

    def test_rollback_restores_everything(self, ledger):
        ledger.mint(DAI, TRADER, 100)
        with pytest.raises(RuntimeError):
            with ledger.atomic():
                ledger.transfer(DAI, TRADER, OTHER_TRADER, 30)
                ledger.mint(USDC, OTHER_TRADER, 5)
                assert ledger.in_transaction
                raise RuntimeError("abort")

        assert ledger.balance_of(TRADER, DAI) == 100
        assert ledger.balance_of(OTHER_TRADER, DAI) == 0
        assert ledger.balance_of(OTHER_TRADER, USDC) == 0
        assert not ledger.in_transaction

    def test_nested_inner_rollback(self):
        ledger = AssetLedger()
        ledger.mint(DAI, TRADER, 100)
        with ledger.atomic():
            ledger.transfer(DAI, TRADER, OTHER_TRADER, 10)
            with pytest.raises(InsufficientBalance):
                with ledger.atomic():
                    ledger.transfer(DAI, TRADER, OTHER_TRADER, 20)
                    ledger.transfer(DAI, TRADER, OTHER_TRADER, 1000)

        assert ledger.balance_of(TRADER, DAI) == 90
        assert ledger.balance_of(OTHER_TRADER, DAI) == 10
