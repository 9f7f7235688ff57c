# inventory_seeder/services/history_service.py
import random
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_seeder.config import config
from inventory_seeder.core.aggregation import SaleRecord
from inventory_seeder.core.history import HistoryPolicy, StockLedgerEntry, synthesize_history
from inventory_seeder.exceptions import DatabaseError, HistoryError
from inventory_seeder.models import ProductHistory
from inventory_seeder.services.repositories import ProductRepository, SalesRepository
from inventory_seeder.logging_setup import get_logger

logger = get_logger(__name__)

class HistoryService:
    """Service for building and storing synthesized product stock ledgers."""

    def __init__(self, session: Session, policy: HistoryPolicy = None):
        """Initialize the history service.

        Args:
            session: Database session
            policy: History policy (defaults to the HISTORY configuration)
        """
        self.session = session
        self._policy = policy
        self.products = ProductRepository(session)
        self.sales = SalesRepository(session)

    @property
    def policy(self) -> HistoryPolicy:
        if self._policy is None:
            self._policy = HistoryPolicy.from_config(config.history_config)
        return self._policy

    def build_history(
        self,
        product_id: str,
        rng: random.Random,
        sales: Optional[Sequence[SaleRecord]] = None,
        now: datetime = None
    ) -> List[StockLedgerEntry]:
        """Build the stock ledger for a product.

        Args:
            product_id: Product ID
            rng: Random source
            sales: Product's sales, loaded from the database when not given
            now: Reference time for restock dates

        Returns:
            Ledger entries sorted by date ascending
        """
        if sales is None:
            sales = self.sales.list_sales_for_product(product_id)

        current_quantity = self.products.get_current_quantity(product_id)
        entries = synthesize_history(product_id, current_quantity, sales, self.policy, rng, now=now)

        if entries and entries[-1].quantity_after != current_quantity:
            raise HistoryError(
                f"Ledger for product {product_id} ends at {entries[-1].quantity_after}, "
                f"expected {current_quantity}"
            )

        negative = [entry for entry in entries if entry.quantity_after < 0]
        if negative:
            logger.debug(f"Product {product_id}: {len(negative)} ledger rows below zero")

        return entries

    def replace_history(self, product_id: str, entries: Sequence[StockLedgerEntry]) -> int:
        """Replace a product's stored ledger with new entries.

        Args:
            product_id: Product ID
            entries: Ledger entries to store

        Returns:
            Number of rows written
        """
        try:
            self.session.query(ProductHistory).filter(
                ProductHistory.product_id == product_id
            ).delete(synchronize_session=False)

            self.session.add_all([
                ProductHistory(
                    product_id=entry.product_id,
                    date=entry.date,
                    quantity=entry.quantity_after,
                    change_amount=entry.change_amount,
                    change_type=entry.change_type,
                    reference_id=entry.reference_id,
                    created_at=entry.created_at
                )
                for entry in entries
            ])
            self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to store history for product {product_id}: {str(e)}",
                details={'product_id': product_id}
            )

        return len(entries)

    def get_history(self, product_id: str) -> List[ProductHistory]:
        """Get a product's stored ledger ordered by date."""
        return self.session.query(ProductHistory).filter(
            ProductHistory.product_id == product_id
        ).order_by(ProductHistory.date, ProductHistory.created_at).all()
