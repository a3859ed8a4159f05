"""
Triangular arbitrage decision and simulated execution.

Evaluates the forward and reverse conditions against a quote snapshot
and, for each one that holds, runs a fixed-notional three-leg cycle
against the ledger.
"""

import logging
import math
from collections.abc import Callable

from triarb.config.constants import DEFAULT_NOTIONAL
from triarb.core.types import (
    ArbitrageOpportunity,
    Asset,
    CycleResult,
    Direction,
    LegFill,
    Quote,
    QuoteSnapshot,
    SymbolID,
)
from triarb.market.symbols import TriangleSymbols
from triarb.strategy.ledger import Ledger
from triarb.utils.time import get_timestamp_us


logger = logging.getLogger(__name__)


# Type alias for cycle callbacks
CycleCallback = Callable[[CycleResult], None]

# (symbol, from_asset, to_asset) per leg, in execution order
Route = tuple[
    tuple[SymbolID, Asset, Asset],
    tuple[SymbolID, Asset, Asset],
    tuple[SymbolID, Asset, Asset],
]

FORWARD_ROUTE: Route = (
    (SymbolID.AB, Asset.A, Asset.B),  # buy B with A at ask(A/B)
    (SymbolID.BC, Asset.B, Asset.C),  # buy C with B at ask(B/C)
    (SymbolID.AC, Asset.C, Asset.A),  # back to A at bid(A/C)
)

REVERSE_ROUTE: Route = (
    (SymbolID.AC, Asset.A, Asset.C),  # to C at ask(A/C)
    (SymbolID.BC, Asset.C, Asset.B),  # to B at bid(B/C)
    (SymbolID.AB, Asset.B, Asset.A),  # back to A at bid(A/B)
)

ROUTES: dict[Direction, Route] = {
    Direction.FORWARD: FORWARD_ROUTE,
    Direction.REVERSE: REVERSE_ROUTE,
}


class ArbitrageEngine:
    """
    Stateless-per-call arbitrage evaluator.

    Every call to ``evaluate`` looks only at the snapshot it is given:
    the same snapshot evaluated twice trades twice if the conditions
    still hold. Both directions are checked on every call and both may
    fire on the same tick, forward first.
    """

    __slots__ = ("_ledger", "_notional", "_symbols", "_callbacks")

    def __init__(
        self,
        ledger: Ledger,
        notional: float = DEFAULT_NOTIONAL,
        symbols: TriangleSymbols | None = None,
    ) -> None:
        """
        Initialize engine.

        Args:
            ledger: Ledger mutated by executed legs.
            notional: Units of asset A committed per cycle.
            symbols: Symbol table, used for asset names in logs.
        """
        if notional <= 0:
            raise ValueError(f"notional must be positive, got {notional}")

        self._ledger = ledger
        self._notional = notional
        self._symbols = symbols or TriangleSymbols()
        self._callbacks: list[CycleCallback] = []

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def notional(self) -> float:
        return self._notional

    def register_callback(self, callback: CycleCallback) -> None:
        """Register a callback invoked after every executed cycle."""
        self._callbacks.append(callback)

    def _usable_quotes(self, snapshot: QuoteSnapshot) -> tuple[Quote, Quote, Quote] | None:
        """Get (A/B, B/C, A/C) quotes, or None if any is missing or unusable."""
        ab = snapshot.get(SymbolID.AB)
        bc = snapshot.get(SymbolID.BC)
        ac = snapshot.get(SymbolID.AC)

        if ab is None or bc is None or ac is None:
            return None

        for quote in (ab, bc, ac):
            if not quote.is_usable:
                logger.debug(
                    f"Ignoring snapshot: {self._symbols.wire_name(quote.symbol)} "
                    f"bid={quote.bid} ask={quote.ask} spread={quote.spread}"
                )
                return None

        return ab, bc, ac

    def detect(self, snapshot: QuoteSnapshot) -> tuple[ArbitrageOpportunity, ...]:
        """
        Check both arbitrage conditions without touching the ledger.

        Forward:  ask(A/B) * ask(B/C) < bid(A/C) * (1 - fee) * (1 - slip)
        Reverse:  bid(A/B) * bid(B/C) > ask(A/C) * (1 + fee) * (1 + slip)

        Both comparisons are strict.

        Args:
            snapshot: Mapping of SymbolID -> Quote.

        Returns:
            Triggered opportunities, forward before reverse.
        """
        quotes = self._usable_quotes(snapshot)
        if quotes is None:
            return ()

        ab, bc, ac = quotes
        fee = self._ledger.fee_rate
        slip = self._ledger.slippage_rate
        timestamp = get_timestamp_us()
        opportunities: list[ArbitrageOpportunity] = []

        forward_cost = ab.ask * bc.ask
        forward_proceeds = ac.bid * (1.0 - fee) * (1.0 - slip)
        reverse_proceeds = ab.bid * bc.bid
        reverse_cost = ac.ask * (1.0 + fee) * (1.0 + slip)

        # Extreme prices can underflow to zero or overflow to inf
        sides = (forward_cost, forward_proceeds, reverse_proceeds, reverse_cost)
        if not all(0.0 < side < math.inf for side in sides):
            logger.debug(f"Ignoring snapshot: cycle products out of range {sides}")
            return ()

        if forward_cost < forward_proceeds:
            opportunities.append(
                ArbitrageOpportunity(
                    direction=Direction.FORWARD,
                    implied_gain=forward_proceeds / forward_cost - 1.0,
                    prices=(ab.ask, bc.ask, ac.bid),
                    timestamp_us=timestamp,
                )
            )

        if reverse_proceeds > reverse_cost:
            opportunities.append(
                ArbitrageOpportunity(
                    direction=Direction.REVERSE,
                    implied_gain=reverse_proceeds / reverse_cost - 1.0,
                    prices=(ac.ask, bc.bid, ab.bid),
                    timestamp_us=timestamp,
                )
            )

        return tuple(opportunities)

    def evaluate(self, snapshot: QuoteSnapshot) -> tuple[CycleResult, ...]:
        """
        Detect opportunities and execute a cycle for each.

        A snapshot missing any symbol, holding a crossed or non-positive
        quote, or whose cycle products leave the float range, is a no-op.

        Args:
            snapshot: Mapping of SymbolID -> Quote.

        Returns:
            Executed cycles (empty if nothing fired).
        """
        results: list[CycleResult] = []

        for opportunity in self.detect(snapshot):
            result = self._execute(opportunity)
            results.append(result)

            for callback in self._callbacks:
                callback(result)

        return tuple(results)

    def _execute(self, opportunity: ArbitrageOpportunity) -> CycleResult:
        """Apply the three legs of a cycle in route order."""
        route = ROUTES[opportunity.direction]
        direction = opportunity.direction.value

        logger.info(
            f"{direction} opportunity: implied gain {opportunity.implied_gain * 100:.4f}%"
        )

        amount = self._notional
        fills: list[LegFill] = []

        for index, ((symbol, from_asset, to_asset), price) in enumerate(
            zip(route, opportunity.prices, strict=True), start=1
        ):
            fill = self._apply_leg(index, symbol, from_asset, to_asset, price, amount)
            fills.append(fill)
            amount = fill.received

        result = CycleResult(
            opportunity=opportunity,
            legs=(fills[0], fills[1], fills[2]),
            notional=self._notional,
        )

        base = self._symbols.asset_name(Asset.A)
        logger.info(
            f"{direction} cycle complete: {base} {self._notional:.2f} -> "
            f"{result.legs[2].received:.8f} (net {result.net_change:+.8f})"
        )

        return result

    def _apply_leg(
        self,
        index: int,
        symbol: SymbolID,
        from_asset: Asset,
        to_asset: Asset,
        price: float,
        amount: float,
    ) -> LegFill:
        """
        Apply one leg.

        The fee inflates the spending side; slippage deflates the
        receiving side.
        """
        spent = amount / (1.0 - self._ledger.fee_rate)
        received = amount * price * (1.0 - self._ledger.slippage_rate)

        overdrawn = self._ledger.apply_leg(from_asset, to_asset, spent, received)

        logger.info(
            f"  leg {index} {self._symbols.wire_name(symbol)}: "
            f"spent {spent:.8f} {self._symbols.asset_name(from_asset)}, "
            f"received {received:.8f} {self._symbols.asset_name(to_asset)} @ {price}"
        )

        return LegFill(
            index=index,
            symbol=symbol,
            from_asset=from_asset,
            to_asset=to_asset,
            price=price,
            amount=amount,
            spent=spent,
            received=received,
            overdrawn=overdrawn,
        )
