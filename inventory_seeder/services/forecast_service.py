# inventory_seeder/services/forecast_service.py
import random
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_seeder.config import config
from inventory_seeder.core.aggregation import MonthlyTotal
from inventory_seeder.core.demand_forecast import ForecastPolicy, ForecastPoint, forecast_demand
from inventory_seeder.exceptions import DatabaseError, ForecastError
from inventory_seeder.models import Forecast
from inventory_seeder.services.repositories import SalesRepository
from inventory_seeder.logging_setup import get_logger

# Set up logging
logger = get_logger(__name__)

class ForecastService:
    """Service for handling demand forecasting operations."""

    def __init__(self, session: Session, policy: ForecastPolicy = None):
        """Initialize the forecast service.

        Args:
            session: Database session
            policy: Forecast policy (defaults to the FORECAST configuration)
        """
        self.session = session
        self._policy = policy
        self.sales = SalesRepository(session)

    @property
    def policy(self) -> ForecastPolicy:
        if self._policy is None:
            self._policy = ForecastPolicy.from_config(config.forecast_config)
        return self._policy

    def build_forecast(
        self,
        product_id: str,
        rng: random.Random,
        monthly_totals: Optional[Sequence[MonthlyTotal]] = None,
        today: date = None
    ) -> List[ForecastPoint]:
        """Build forecast points for a product.

        Args:
            product_id: Product ID
            rng: Random source
            monthly_totals: Monthly sales, loaded from the database when not given
            today: Reference date

        Returns:
            Forecast points, empty when the product has never sold
        """
        if monthly_totals is None:
            monthly_totals = self.sales.list_monthly_totals(product_id)

        if not monthly_totals:
            logger.debug(f"No sales history for product {product_id}, skipping forecast")
            return []

        points = forecast_demand(product_id, monthly_totals, self.policy, rng, today=today)

        if len(points) != self.policy.horizon_months:
            raise ForecastError(
                f"Forecast for product {product_id} has {len(points)} points, "
                f"expected {self.policy.horizon_months}"
            )

        return points

    def replace_forecast(self, product_id: str, points: Sequence[ForecastPoint]) -> int:
        """Replace a product's stored forecast.

        Args:
            product_id: Product ID
            points: Forecast points to store

        Returns:
            Number of rows written
        """
        try:
            self.session.query(Forecast).filter(
                Forecast.product_id == product_id
            ).delete(synchronize_session=False)

            self.session.add_all([
                Forecast(
                    product_id=point.product_id,
                    date=point.date,
                    predicted_demand=point.predicted_demand,
                    confidence_score=point.confidence_score,
                    model_type=point.model_type
                )
                for point in points
            ])
            self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to store forecast for product {product_id}: {str(e)}",
                details={'product_id': product_id}
            )

        return len(points)

    def get_forecast(self, product_id: str) -> List[Forecast]:
        """Get a product's stored forecast ordered by date."""
        return self.session.query(Forecast).filter(
            Forecast.product_id == product_id
        ).order_by(Forecast.date).all()
