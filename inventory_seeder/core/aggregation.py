# inventory_seeder/core/aggregation.py
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List

from inventory_seeder.exceptions import ValidationError
from inventory_seeder.utils.date_utils import month_start

@dataclass(frozen=True)
class SalesFact:
    """A quantity of a product sold with an order."""
    product_id: str
    quantity: int
    occurred_at: datetime
    order_id: str

@dataclass(frozen=True)
class SaleRecord:
    date: datetime
    quantity: int
    order_id: str

@dataclass(frozen=True)
class MonthlyTotal:
    month: date
    total_quantity: int

def _validate(fact: SalesFact) -> None:
    if fact.quantity <= 0:
        raise ValidationError(
            f"Sale quantity must be positive, got {fact.quantity}",
            details={'product_id': fact.product_id, 'order_id': fact.order_id}
        )

def group_sales_by_product(facts: Iterable[SalesFact]) -> Dict[str, List[SaleRecord]]:
    """Group sales per product, each list sorted by date ascending.

    Order id breaks ties between sales with the same timestamp so the
    result does not depend on the order facts arrive in.

    Args:
        facts: Sales facts for any number of products

    Returns:
        Dictionary of product id to its sales
    """
    grouped = defaultdict(list)
    for fact in facts:
        _validate(fact)
        grouped[fact.product_id].append(
            SaleRecord(date=fact.occurred_at, quantity=fact.quantity, order_id=fact.order_id)
        )

    return {
        product_id: sorted(records, key=lambda r: (r.date, str(r.order_id)))
        for product_id, records in grouped.items()
    }

def group_monthly_totals(facts: Iterable[SalesFact]) -> Dict[str, List[MonthlyTotal]]:
    """Sum sold quantities per product and calendar month.

    Args:
        facts: Sales facts for any number of products

    Returns:
        Dictionary of product id to monthly totals sorted by month
    """
    totals = defaultdict(lambda: defaultdict(int))
    for fact in facts:
        _validate(fact)
        totals[fact.product_id][month_start(fact.occurred_at)] += fact.quantity

    return {
        product_id: [
            MonthlyTotal(month=month, total_quantity=quantity)
            for month, quantity in sorted(by_month.items())
        ]
        for product_id, by_month in totals.items()
    }
