"""
Financial rules on top of the bank: purchases, construction, rent,
transfers, liquidation and bankruptcy.
"""

import logging
from typing import List, Optional

from landlord.config import GameConfig, percent_floor
from landlord.money import Bank, EventLog, EventType, Transaction
from landlord.player import PlayerState
from landlord.spaces import CompanySquare, OwnableSquare, StreetSquare

logger = logging.getLogger(__name__)


class EconomyService:
    """
    Applies every money rule of the game.

    Payments by a player always go through ``liquidate_or_bankrupt_if_needed``
    first; when that fails the payment is dropped, so a creditor never
    receives part of an obligation.
    """

    def __init__(
        self,
        bank: Bank,
        config: Optional[GameConfig] = None,
        event_log: Optional[EventLog] = None,
    ):
        self.bank = bank
        self.config = config or GameConfig()
        self.event_log = event_log or EventLog()

    # === Purchases and construction ===

    def attempt_buy(self, player: PlayerState, prop: OwnableSquare) -> bool:
        """
        Buy an unowned square from the bank.
        Returns False (and changes nothing) if owned or unaffordable.
        """
        if prop.has_owner():
            return False
        if not player.can_afford(prop.price):
            return False

        self.bank.transfer(player, None, prop.price)
        prop.set_owner(player)
        player.add_property(prop)

        self.event_log.log(
            EventType.PURCHASE,
            player_id=player.player_id,
            property=prop.name,
            index=prop.index,
            price=prop.price,
            new_balance=player.cash,
        )
        logger.debug(f"{player.name} bought {prop.name} for {prop.price}")
        return True

    def attempt_build_house(self, player: PlayerState, street: StreetSquare) -> bool:
        """Build one house on a street the player owns."""
        if not street.is_owned_by(player):
            return False
        if not street.can_build_house():
            return False
        cost = street.house_cost
        if not player.can_afford(cost):
            return False

        self.bank.transfer(player, None, cost)
        street.build_house()

        self.event_log.log(
            EventType.BUILD_HOUSE,
            player_id=player.player_id,
            property=street.name,
            index=street.index,
            cost=cost,
            houses=street.houses,
            new_balance=player.cash,
        )
        return True

    def attempt_build_hotel(self, player: PlayerState, street: StreetSquare) -> bool:
        """Build the hotel on a street the player owns (needs at least one house)."""
        if not street.is_owned_by(player):
            return False
        if not street.can_build_hotel():
            return False
        cost = street.hotel_cost
        if not player.can_afford(cost):
            return False

        self.bank.transfer(player, None, cost)
        street.build_hotel()

        self.event_log.log(
            EventType.BUILD_HOTEL,
            player_id=player.player_id,
            property=street.name,
            index=street.index,
            cost=cost,
            new_balance=player.cash,
        )
        return True

    # === Payments ===

    def charge_rent(self, visitor: PlayerState, owner: PlayerState, rent: int) -> None:
        """Visitor pays an already computed rent to the owner."""
        if rent <= 0:
            return
        if not self.liquidate_or_bankrupt_if_needed(visitor, rent):
            return

        self.bank.transfer(visitor, owner, rent)
        self.event_log.log(
            EventType.RENT_PAYMENT,
            player_id=visitor.player_id,
            owner=owner.player_id,
            amount=rent,
            payer_balance=visitor.cash,
            owner_balance=owner.cash,
        )

    def transfer(self, source: PlayerState, target: PlayerState, amount: int) -> None:
        """Player to player payment."""
        if amount <= 0 or source.is_bankrupt:
            return
        if not self.liquidate_or_bankrupt_if_needed(source, amount):
            return
        self.bank.transfer(source, target, amount)

    def apply_payment(self, player: PlayerState, amount: int) -> None:
        """Player pays the bank."""
        if amount <= 0:
            return
        if not self.liquidate_or_bankrupt_if_needed(player, amount):
            return
        self.bank.transfer(player, None, amount)

    def apply_income(self, player: PlayerState, amount: int) -> None:
        """Bank pays the player."""
        if amount <= 0:
            return
        self.bank.transfer(None, player, amount)

    def credit_pass_start(self, player: PlayerState) -> None:
        """Fixed bonus for crossing the start square."""
        bonus = self.config.pass_start_bonus
        self.apply_income(player, bonus)
        self.event_log.log(
            EventType.PASS_START,
            player_id=player.player_id,
            amount=bonus,
            new_balance=player.cash,
        )

    # === Liquidity ===

    def liquidate_or_bankrupt_if_needed(self, player: PlayerState, required: int) -> bool:
        """
        Make sure ``player`` can pay ``required``.

        Sells properties back to the bank in ownership order until the
        shortfall is covered. If every property is gone and cash is still
        short, the player goes bankrupt and this returns False.
        """
        if player.can_afford(required):
            return True

        missing = player.shortfall(required)
        logger.debug(f"{player.name} is short {missing} for a payment of {required}")

        for prop in list(player.properties):
            missing -= self.buyback(prop, player)
            if missing <= 0:
                return True

        self.declare_bankruptcy(player)
        return False

    def declare_bankruptcy(self, player: PlayerState) -> None:
        """
        Remove the player from the game.

        Remaining titles go back to the bank without payment; any cash left
        is returned to the bank so the money supply stays consistent.
        """
        returned = player.property_indices()
        for prop in list(player.properties):
            player.remove_property(prop)
            prop.remove_owner(player)

        self.bank.transfer(player, None, player.cash)
        player.mark_bankrupt()

        self.event_log.log(
            EventType.BANKRUPTCY,
            player_id=player.player_id,
            properties=returned,
        )
        logger.info(f"{player.name} ({player.player_id}) went bankrupt")

    def buyback(self, prop: OwnableSquare, player: PlayerState) -> int:
        """
        Sell one property back to the bank at the buy-back rate.
        Returns the amount paid to the player.
        """
        received = self.evaluate_sell_value(prop)
        self.bank.transfer(None, player, received)

        player.remove_property(prop)
        prop.remove_owner(player)

        self.event_log.log(
            EventType.LIQUIDATION,
            player_id=player.player_id,
            property=prop.name,
            index=prop.index,
            amount=received,
            new_balance=player.cash,
        )
        return received

    def evaluate_sell_value(self, prop: OwnableSquare) -> int:
        """What the bank would pay for ``prop`` right now."""
        return percent_floor(prop.total_investment(), self.config.buyback_percent)

    def attempt_sell(self, player: PlayerState, prop: OwnableSquare) -> bool:
        """Voluntary sale of an owned property to the bank."""
        if not prop.is_owned_by(player):
            return False
        amount = self.buyback(prop, player)
        self.event_log.log(
            EventType.SALE,
            player_id=player.player_id,
            property=prop.name,
            index=prop.index,
            amount=amount,
        )
        return True

    # === Restoring saved games ===

    def restore_street(self, player: PlayerState, street: StreetSquare, houses: int, hotel: bool) -> None:
        """Reinstate ownership and buildings read from a save; moves no money."""
        street.set_owner(player)
        player.add_property(street)
        for _ in range(houses):
            street.build_house()
        if hotel:
            street.build_hotel()

    def restore_company(self, player: PlayerState, company: CompanySquare) -> None:
        """Reinstate a company owner read from a save; moves no money."""
        company.set_owner(player)
        player.add_property(company)

    def drain_transaction_log(self) -> List[Transaction]:
        """Transactions since the previous call; the only view on money movement."""
        return self.bank.drain_transactions()
