"""
Simulated balance ledger.

Tracks the three triangle balances together with the fee and
slippage parameters applied to every leg.
"""

import logging
import threading
from collections.abc import Callable

from triarb.core.types import Asset, OverdraftEvent
from triarb.utils.time import get_timestamp_us


logger = logging.getLogger(__name__)


# Type alias for overdraft callbacks
OverdraftCallback = Callable[[OverdraftEvent], None]


def _check_rate(name: str, value: float) -> float:
    if not 0.0 <= value < 1.0:
        raise ValueError(f"{name} must be in [0, 1), got {value}")
    return value


class Ledger:
    """
    Balances for assets A, B and C.

    Non-negativity is not enforced. A debit that takes a balance
    below zero still goes through; it is logged and recorded as an
    OverdraftEvent so the condition stays observable.

    A lock guards every mutation and every balance snapshot, so a
    reader on another thread never sees half of a leg.
    """

    def __init__(
        self,
        balance_a: float = 0.0,
        balance_b: float = 0.0,
        balance_c: float = 0.0,
        fee_rate: float = 0.0,
        slippage_rate: float = 0.0,
    ) -> None:
        """
        Initialize ledger.

        Args:
            balance_a: Initial balance of the base asset.
            balance_b: Initial balance of the intermediate asset.
            balance_c: Initial balance of the quote-settlement asset.
            fee_rate: Fee per leg, in [0, 1).
            slippage_rate: Slippage per leg, in [0, 1).

        Raises:
            ValueError: On out-of-range rates or negative balances.
        """
        self._fee_rate = _check_rate("fee_rate", fee_rate)
        self._slippage_rate = _check_rate("slippage_rate", slippage_rate)

        balances = {Asset.A: balance_a, Asset.B: balance_b, Asset.C: balance_c}
        for asset, value in balances.items():
            if value < 0:
                raise ValueError(f"Initial balance of {asset.value} is negative: {value}")

        self._balances: dict[Asset, float] = {a: float(v) for a, v in balances.items()}
        self._overdrafts: list[OverdraftEvent] = []
        self._callbacks: list[OverdraftCallback] = []
        self._lock = threading.Lock()

    @property
    def fee_rate(self) -> float:
        return self._fee_rate

    @property
    def slippage_rate(self) -> float:
        return self._slippage_rate

    def register_overdraft_callback(self, callback: OverdraftCallback) -> None:
        """Register a callback invoked on every overdraft."""
        self._callbacks.append(callback)

    def _debit_locked(self, asset: Asset, amount: float) -> OverdraftEvent | None:
        before = self._balances[asset]
        after = before - amount
        self._balances[asset] = after

        if after >= 0:
            return None

        event = OverdraftEvent(
            asset=asset,
            balance_before=before,
            amount=amount,
            balance_after=after,
            timestamp_us=get_timestamp_us(),
        )
        self._overdrafts.append(event)
        return event

    def _notify(self, event: OverdraftEvent | None) -> bool:
        if event is None:
            return False

        logger.warning(
            f"Overdraft on {event.asset.value}: "
            f"{event.balance_before:.8f} - {event.amount:.8f} = {event.balance_after:.8f}"
        )
        for callback in self._callbacks:
            callback(event)
        return True

    def debit(self, asset: Asset, amount: float) -> bool:
        """
        Subtract an amount from a balance.

        Returns:
            True if the debit left the balance negative.
        """
        if amount < 0:
            raise ValueError(f"Debit amount must be non-negative, got {amount}")

        with self._lock:
            event = self._debit_locked(asset, amount)

        return self._notify(event)

    def credit(self, asset: Asset, amount: float) -> None:
        """Add an amount to a balance."""
        if amount < 0:
            raise ValueError(f"Credit amount must be non-negative, got {amount}")

        with self._lock:
            self._balances[asset] += amount

    def apply_leg(
        self,
        from_asset: Asset,
        to_asset: Asset,
        spent: float,
        received: float,
    ) -> bool:
        """
        Debit one asset and credit another as a single step.

        Returns:
            True if the debit left the source balance negative.
        """
        if spent < 0 or received < 0:
            raise ValueError(f"Leg amounts must be non-negative: spent={spent}, received={received}")

        with self._lock:
            event = self._debit_locked(from_asset, spent)
            self._balances[to_asset] += received

        return self._notify(event)

    def balance(self, asset: Asset) -> float:
        """Get a single balance."""
        with self._lock:
            return self._balances[asset]

    def balances(self) -> dict[Asset, float]:
        """
        Get a consistent copy of all balances.

        Returns:
            Dict of Asset -> balance.
        """
        with self._lock:
            return dict(self._balances)

    @property
    def overdrafts(self) -> tuple[OverdraftEvent, ...]:
        """All overdrafts recorded so far."""
        with self._lock:
            return tuple(self._overdrafts)

    def __repr__(self) -> str:
        b = self.balances()
        return (
            f"Ledger(A={b[Asset.A]}, B={b[Asset.B]}, C={b[Asset.C]}, "
            f"fee_rate={self._fee_rate}, slippage_rate={self._slippage_rate})"
        )
