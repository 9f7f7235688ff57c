# inventory_seeder/services/repositories.py
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_seeder.core.aggregation import (
    SalesFact, SaleRecord, MonthlyTotal,
    group_sales_by_product, group_monthly_totals
)
from inventory_seeder.exceptions import DatabaseError
from inventory_seeder.models import Order, OrderItem, Product
from inventory_seeder.logging_setup import get_logger

logger = get_logger(__name__)

class ProductRepository:
    """Read access to live product records."""

    def __init__(self, session: Session):
        self.session = session

    def list_product_ids(self) -> List[str]:
        """Get all product IDs in a stable order."""
        try:
            rows = self.session.query(Product.id).order_by(Product.created_at, Product.id).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to list products: {str(e)}")
        return [row.id for row in rows]

    def get_current_quantity(self, product_id: str) -> int:
        """Get the on-hand quantity of a product.

        Returns:
            Quantity on hand, 0 when the product is missing or has none set
        """
        try:
            quantity = self.session.query(Product.quantity).filter(
                Product.id == product_id
            ).scalar()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to read quantity for product {product_id}: {str(e)}")

        if quantity is None:
            logger.debug(f"No quantity recorded for product {product_id}, using 0")
            return 0
        return quantity

class SalesRepository:
    """Sales facts read from order items joined to their orders."""

    def __init__(self, session: Session):
        self.session = session

    def list_sales_facts(self, product_id: Optional[str] = None) -> List[SalesFact]:
        """Get sales facts, optionally for a single product.

        Args:
            product_id: Optional product ID filter

        Returns:
            List of sales facts ordered by order timestamp
        """
        query = self.session.query(
            OrderItem.product_id,
            OrderItem.quantity,
            Order.created_at,
            OrderItem.order_id
        ).join(Order, OrderItem.order_id == Order.id)

        if product_id is not None:
            query = query.filter(OrderItem.product_id == product_id)

        try:
            rows = query.order_by(Order.created_at.asc()).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to load sales facts: {str(e)}")

        return [
            SalesFact(
                product_id=row.product_id,
                quantity=row.quantity,
                occurred_at=row.created_at,
                order_id=row.order_id
            )
            for row in rows
        ]

    def list_sales_for_product(self, product_id: str) -> List[SaleRecord]:
        """Get a product's sales sorted by date ascending."""
        grouped = group_sales_by_product(self.list_sales_facts(product_id))
        return grouped.get(product_id, [])

    def list_monthly_totals(self, product_id: str) -> List[MonthlyTotal]:
        """Get a product's sold quantity per calendar month, ascending."""
        grouped = group_monthly_totals(self.list_sales_facts(product_id))
        return grouped.get(product_id, [])

    def load_all(self) -> Dict[str, Dict]:
        """Load every sale once and group it both ways.

        Returns:
            Dictionary with 'sales' and 'monthly_totals' maps keyed by product ID
        """
        facts = self.list_sales_facts()
        logger.info(f"Loaded {len(facts)} sales facts")
        return {
            'sales': group_sales_by_product(facts),
            'monthly_totals': group_monthly_totals(facts)
        }
