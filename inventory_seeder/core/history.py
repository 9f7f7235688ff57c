# inventory_seeder/core/history.py
"""Demo stock history synthesizer.

Builds a plausible stock ledger for a product from its current on-hand
quantity and its recorded sales, adding one random restock per month.
The ledger is demo data: it is consistent with itself and with today's
quantity, but it is not an accounting reconciliation.
"""
import enum
import random
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from inventory_seeder.core.aggregation import SaleRecord
from inventory_seeder.exceptions import ConfigError, ValidationError
from inventory_seeder.models import ChangeType
from inventory_seeder.utils.date_utils import add_months, to_date
from inventory_seeder.utils.math_utils import random_between

class NegativeStockPolicy(enum.Enum):
    """What to do when undoing a restock would leave a negative level.

    Values:
        CLAMP ('clamp'): Cap the restock at the level on hand, so no
            reconstructed level drops below zero
        ALLOW ('allow'): Keep the drawn restock and let earlier levels
            go negative
    """
    CLAMP = 'clamp'
    ALLOW = 'allow'

    @classmethod
    def from_string(cls, value: str) -> 'NegativeStockPolicy':
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ConfigError(
                f"Invalid negative stock policy: {value}. Valid values are: clamp, allow"
            )

@dataclass(frozen=True)
class HistoryPolicy:
    window_months: int = 12
    restock_min: int = 10
    restock_max: int = 100
    negative_stock: NegativeStockPolicy = NegativeStockPolicy.CLAMP

    def __post_init__(self):
        if self.window_months < 0:
            raise ConfigError(f"window_months must be >= 0, got {self.window_months}")
        if self.restock_min < 0 or self.restock_min > self.restock_max:
            raise ConfigError(
                f"Invalid restock range: {self.restock_min}-{self.restock_max}"
            )

    @classmethod
    def from_config(cls, settings: Dict) -> 'HistoryPolicy':
        """Build a policy from the HISTORY configuration dictionary."""
        policy = settings.get('negative_stock_policy', NegativeStockPolicy.CLAMP.value)
        return cls(
            window_months=settings.get('window_months', 12),
            restock_min=settings.get('restock_min', 10),
            restock_max=settings.get('restock_max', 100),
            negative_stock=NegativeStockPolicy.from_string(policy)
        )

@dataclass(frozen=True)
class StockLedgerEntry:
    product_id: str
    date: date
    quantity_after: int
    change_amount: int
    change_type: ChangeType
    reference_id: Optional[str]
    created_at: datetime

def _reference_now(now: Optional[datetime], sales: Sequence[SaleRecord]) -> datetime:
    """Current time, carrying the sales' timezone so timestamps stay comparable."""
    if now is None:
        tzinfo = next((s.date.tzinfo for s in sales if isinstance(s.date, datetime)), None)
        now = datetime.now(tzinfo)
    return now

def _as_timestamp(value, tzinfo) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day, tzinfo=tzinfo)

def draw_restock_amounts(policy: HistoryPolicy, rng: random.Random) -> List[int]:
    """Draw one restock amount per month, for months 0..window back from now."""
    return [
        random_between(rng, policy.restock_min, policy.restock_max)
        for _ in range(policy.window_months + 1)
    ]

def synthesize_history(
    product_id: str,
    current_quantity: int,
    sales: Sequence[SaleRecord],
    policy: HistoryPolicy,
    rng: random.Random,
    now: datetime = None
) -> List[StockLedgerEntry]:
    """Synthesize a stock ledger ending at the product's current quantity.

    Every sale becomes an ORDER row and every month of the window gets a
    RESTOCK row. Events are then walked from newest to oldest starting
    at current_quantity: each row records the level right after its
    event, and undoing the event gives the level before it.

    Args:
        product_id: Product ID
        current_quantity: On-hand quantity today
        sales: Sales of the product (any order)
        policy: History policy
        rng: Random source for restock amounts
        now: Reference time for restock dates (defaults to now)

    Returns:
        Ledger entries sorted by date ascending
    """
    if current_quantity is None or current_quantity < 0:
        raise ValidationError(
            f"Current quantity must be a non-negative integer, got {current_quantity}",
            details={'product_id': product_id}
        )

    now = _reference_now(now, sales)

    # (timestamp, change_type, change_amount, reference_id)
    events = []
    for sale in sales:
        if sale.quantity <= 0:
            raise ValidationError(
                f"Sale quantity must be positive, got {sale.quantity}",
                details={'product_id': product_id, 'order_id': sale.order_id}
            )
        events.append((_as_timestamp(sale.date, now.tzinfo), ChangeType.ORDER, -sale.quantity, sale.order_id))

    for months_back, amount in enumerate(draw_restock_amounts(policy, rng)):
        events.append((add_months(now, -months_back), ChangeType.RESTOCK, amount, None))

    # Stable sort keeps insertion order for events sharing a timestamp
    events.sort(key=lambda event: event[0])

    running = current_quantity
    entries = []
    for timestamp, change_type, change_amount, reference_id in reversed(events):
        if (change_type == ChangeType.RESTOCK
                and policy.negative_stock == NegativeStockPolicy.CLAMP
                and change_amount > running):
            change_amount = max(running, 0)

        entries.append(StockLedgerEntry(
            product_id=product_id,
            date=to_date(timestamp),
            quantity_after=running,
            change_amount=change_amount,
            change_type=change_type,
            reference_id=reference_id,
            created_at=timestamp
        ))

        # Undo the event to get the level before it
        running -= change_amount

    entries.reverse()
    return entries

def opening_quantity(entries: Sequence[StockLedgerEntry]) -> Optional[int]:
    """Level before the first ledger event, or None for an empty ledger."""
    if not entries:
        return None
    return entries[0].quantity_after - entries[0].change_amount

def replay_ledger(entries: Sequence[StockLedgerEntry]) -> Optional[int]:
    """Replay change amounts forward from the opening level.

    Returns:
        Final level, which equals the product's quantity for a
        consistent ledger
    """
    level = opening_quantity(entries)
    if level is None:
        return None
    for entry in entries:
        level += entry.change_amount
    return level
