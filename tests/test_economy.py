"""
Tests for purchases, construction, liquidation and bankruptcy.
"""

from landlord.money import EventType
from landlord.player import PlayerColor, PlayerState


def _total_money(bank, *players):
    return bank.cash + sum(p.cash for p in players)


class TestPurchase:
    def test_buy_unowned(self, economy, bank, board, alice):
        street = board.square_at(0)

        assert economy.attempt_buy(alice, street)
        assert alice.cash == 300
        assert street.owner is alice
        assert street in alice.properties
        assert bank.cash == 200200

    def test_cannot_afford(self, economy, bank, board):
        poor = PlayerState("P9", "Poor", PlayerColor.GRAY, 199)
        street = board.square_at(0)

        assert not economy.attempt_buy(poor, street)
        assert poor.cash == 199
        assert not street.has_owner()
        assert poor.properties == []
        assert bank.drain_transactions() == []

    def test_already_owned(self, economy, board, alice, bob):
        street = board.square_at(0)
        economy.attempt_buy(alice, street)

        assert not economy.attempt_buy(bob, street)
        assert bob.cash == 500
        assert street.owner is alice

    def test_purchase_event(self, economy, event_log, board, alice):
        economy.attempt_buy(alice, board.square_at(4))
        [event] = event_log.drain()
        assert event.event_type == EventType.PURCHASE
        assert event.details["price"] == 150


class TestConstruction:
    def test_costs(self, board):
        street = board.square_at(0)
        assert street.house_cost == 100
        assert street.hotel_cost == 200

    def test_build_house(self, economy, board, alice):
        street = board.square_at(0)
        economy.attempt_buy(alice, street)

        assert economy.attempt_build_house(alice, street)
        assert street.houses == 1
        assert alice.cash == 200

    def test_house_cap(self, economy, board, alice):
        street = board.square_at(5)
        alice.credit(1000)
        economy.attempt_buy(alice, street)
        for _ in range(4):
            assert economy.attempt_build_house(alice, street)

        cash = alice.cash
        assert not economy.attempt_build_house(alice, street)
        assert street.houses == 4
        assert alice.cash == cash

    def test_hotel_needs_a_house(self, economy, board, alice):
        street = board.square_at(5)
        economy.attempt_buy(alice, street)

        assert not economy.attempt_build_hotel(alice, street)
        assert economy.attempt_build_house(alice, street)
        assert economy.attempt_build_hotel(alice, street)
        assert street.has_hotel
        assert alice.cash == 500 - 100 - 50 - 100

        assert not economy.attempt_build_hotel(alice, street)

    def test_only_owner_builds(self, economy, board, alice, bob):
        street = board.square_at(0)
        economy.attempt_buy(alice, street)

        assert not economy.attempt_build_house(bob, street)
        assert street.houses == 0
        assert bob.cash == 500

    def test_cannot_afford_house(self, economy, board, alice):
        street = board.square_at(0)
        economy.attempt_buy(alice, street)
        economy.apply_payment(alice, 250)

        assert not economy.attempt_build_house(alice, street)
        assert street.houses == 0
        assert alice.cash == 50


class TestSellValue:
    def test_unowned_is_worth_nothing(self, economy, board):
        assert economy.evaluate_sell_value(board.square_at(0)) == 0

    def test_includes_construction(self, economy, board, alice):
        street = board.square_at(0)
        economy.restore_street(alice, street, 2, False)
        assert economy.evaluate_sell_value(street) == 360

        street.build_hotel()
        assert economy.evaluate_sell_value(street) == 540

    def test_company(self, economy, board, alice):
        company = board.square_at(4)
        economy.restore_company(alice, company)
        assert economy.evaluate_sell_value(company) == 135


class TestVoluntarySale:
    def test_sell_owned(self, economy, event_log, bank, board, alice):
        street = board.square_at(0)
        economy.attempt_buy(alice, street)
        economy.attempt_build_house(alice, street)

        assert economy.attempt_sell(alice, street)
        assert alice.cash == 200 + 270
        assert not street.has_owner()
        assert street.houses == 0
        assert alice.properties == []

        kinds = [e.event_type for e in event_log.drain()]
        assert kinds[-2:] == [EventType.LIQUIDATION, EventType.SALE]

    def test_not_owner(self, economy, board, alice, bob):
        street = board.square_at(0)
        economy.attempt_buy(alice, street)

        assert not economy.attempt_sell(bob, street)
        assert street.owner is alice
        assert bob.cash == 500


class TestLiquidity:
    def test_liquidation_covers_rent(self, economy, bank, board, bob):
        """5 cash plus floor(0.9 * 100) covers a 50 obligation, leaving 45."""
        debtor = PlayerState("P9", "Dora", PlayerColor.GRAY, 5)
        street = board.square_at(5)
        economy.restore_street(debtor, street, 0, False)

        economy.charge_rent(debtor, bob, 50)

        assert debtor.cash == 45
        assert debtor.alive
        assert debtor.properties == []
        assert not street.has_owner()
        assert bob.cash == 550

    def test_liquidation_in_ownership_order(self, economy, board):
        debtor = PlayerState("P9", "Dora", PlayerColor.GRAY, 0)
        first, second = board.square_at(5), board.square_at(0)
        economy.restore_street(debtor, first, 0, False)
        economy.restore_street(debtor, second, 0, False)

        economy.apply_payment(debtor, 80)

        assert debtor.properties == [second]
        assert debtor.cash == 10

    def test_bankruptcy_leaves_creditor_unchanged(self, economy, bank, board, bob):
        debtor = PlayerState("P9", "Dora", PlayerColor.GRAY, 10)
        street = board.square_at(5)
        economy.restore_street(debtor, street, 0, False)

        economy.charge_rent(debtor, bob, 500)

        assert not debtor.alive
        assert debtor.cash == 0
        assert debtor.properties == []
        assert not street.has_owner()
        assert bob.cash == 500

    def test_bankruptcy_conserves_money(self, economy, bank, alice, bob):
        before = _total_money(bank, alice, bob)
        economy.charge_rent(alice, bob, 800)

        assert not alice.alive
        assert _total_money(bank, alice, bob) == before

    def test_bankruptcy_event(self, economy, event_log, alice):
        economy.apply_payment(alice, 1000)
        events = event_log.drain()
        assert events[-1].event_type == EventType.BANKRUPTCY
        assert events[-1].player_id == "P1"

    def test_enough_cash_skips_liquidation(self, economy, board, alice):
        street = board.square_at(0)
        economy.attempt_buy(alice, street)

        assert economy.liquidate_or_bankrupt_if_needed(alice, 300)
        assert street.owner is alice


class TestPayments:
    def test_rent_not_charged_when_zero(self, economy, bank, alice, bob):
        economy.charge_rent(alice, bob, 0)
        assert bank.drain_transactions() == []

    def test_transfer_and_income(self, economy, alice, bob):
        economy.transfer(alice, bob, 30)
        economy.apply_income(alice, 5)
        assert alice.cash == 475
        assert bob.cash == 530

    def test_pass_start_bonus(self, economy, event_log, alice):
        economy.credit_pass_start(alice)
        assert alice.cash == 700
        assert event_log.drain()[-1].event_type == EventType.PASS_START

    def test_transactions_in_order(self, economy, alice, bob):
        economy.apply_payment(alice, 10)
        economy.transfer(bob, alice, 20)
        economy.apply_income(bob, 30)

        log = economy.drain_transaction_log()
        assert [(t.source, t.target, t.amount) for t in log] == [
            ("Alice", "BANK", 10),
            ("Bob", "Alice", 20),
            ("BANK", "Bob", 30),
        ]
        assert economy.drain_transaction_log() == []

    def test_money_is_conserved(self, economy, bank, board, alice, bob, carol):
        before = _total_money(bank, alice, bob, carol)

        economy.attempt_buy(alice, board.square_at(0))
        economy.attempt_build_house(alice, board.square_at(0))
        economy.charge_rent(bob, alice, board.square_at(0).rent())
        economy.transfer(carol, bob, 40)
        economy.credit_pass_start(carol)

        assert _total_money(bank, alice, bob, carol) == before
