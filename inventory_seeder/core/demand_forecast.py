# inventory_seeder/core/demand_forecast.py
import random
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Sequence

from inventory_seeder.config import DEFAULT_SEASONALITY
from inventory_seeder.core.aggregation import MonthlyTotal
from inventory_seeder.exceptions import ConfigError
from inventory_seeder.utils.date_utils import add_months
from inventory_seeder.utils.math_utils import mean, round_half_up

@dataclass(frozen=True)
class ForecastPolicy:
    horizon_months: int = 3
    recent_months: int = 3
    damping_min: float = 0.8
    damping_max: float = 1.2
    confidence_min: int = 70
    confidence_max: int = 95
    model_type: str = 'SMA'
    seasonality: Dict[int, float] = field(default_factory=lambda: dict(DEFAULT_SEASONALITY))

    def __post_init__(self):
        if self.horizon_months < 1:
            raise ConfigError(f"horizon_months must be >= 1, got {self.horizon_months}")
        if self.recent_months < 1:
            raise ConfigError(f"recent_months must be >= 1, got {self.recent_months}")
        if self.damping_min <= 0 or self.damping_min > self.damping_max:
            raise ConfigError(f"Invalid damping range: {self.damping_min}-{self.damping_max}")
        if not 0 <= self.confidence_min <= self.confidence_max <= 100:
            raise ConfigError(
                f"Invalid confidence range: {self.confidence_min}-{self.confidence_max}"
            )
        missing = set(range(1, 13)) - set(self.seasonality)
        if missing:
            raise ConfigError(f"Seasonality is missing months: {sorted(missing)}")

    @classmethod
    def from_config(cls, settings: Dict) -> 'ForecastPolicy':
        """Build a policy from the FORECAST configuration dictionary."""
        defaults = cls()
        return cls(
            horizon_months=settings.get('horizon_months', defaults.horizon_months),
            recent_months=settings.get('recent_months', defaults.recent_months),
            damping_min=settings.get('damping_min', defaults.damping_min),
            damping_max=settings.get('damping_max', defaults.damping_max),
            confidence_min=settings.get('confidence_min', defaults.confidence_min),
            confidence_max=settings.get('confidence_max', defaults.confidence_max),
            model_type=settings.get('model_type', defaults.model_type),
            seasonality=settings.get('seasonality') or dict(DEFAULT_SEASONALITY)
        )

@dataclass(frozen=True)
class ForecastPoint:
    product_id: str
    date: date
    predicted_demand: int
    confidence_score: int
    model_type: str

def seasonal_multiplier(month: int, seasonality: Dict[int, float] = None) -> float:
    """Get the demand multiplier for a calendar month.

    Args:
        month: Calendar month, 1-12
        seasonality: Month to multiplier table (defaults to holiday 1.5,
            summer 1.3, January/February 0.7, otherwise 1.0)

    Returns:
        Seasonal multiplier
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    table = seasonality or DEFAULT_SEASONALITY
    return table.get(month, 1.0)

def calculate_base_forecast(monthly_totals: Sequence[MonthlyTotal], recent_months: int = 3) -> float:
    """Moving average over the most recent months of sales.

    Uses the last `recent_months` totals when that many exist, otherwise
    every month available.

    Args:
        monthly_totals: Monthly totals sorted by month ascending
        recent_months: Size of the averaging window

    Returns:
        Average monthly demand, 0.0 when there is no history
    """
    if not monthly_totals:
        return 0.0

    quantities = [total.total_quantity for total in monthly_totals]
    if len(quantities) >= recent_months:
        quantities = quantities[-recent_months:]

    return mean(quantities)

def apply_damping(base_forecast: float, factor: float) -> int:
    """Scale the base forecast, rounding and never going below 1."""
    return max(1, round_half_up(base_forecast * factor))

def forecast_demand(
    product_id: str,
    monthly_totals: Sequence[MonthlyTotal],
    policy: ForecastPolicy,
    rng: random.Random,
    today: date = None
) -> List[ForecastPoint]:
    """Forecast demand for the next months of a product.

    Args:
        product_id: Product ID
        monthly_totals: Product's monthly sales, sorted by month
        policy: Forecast policy
        rng: Random source for damping and confidence
        today: Reference date (defaults to today)

    Returns:
        One point per forecast month, or an empty list when the product
        has no sales history
    """
    if not monthly_totals:
        return []

    today = today or date.today()

    base_forecast = calculate_base_forecast(monthly_totals, policy.recent_months)
    damped = apply_damping(base_forecast, rng.uniform(policy.damping_min, policy.damping_max))

    points = []
    for offset in range(1, policy.horizon_months + 1):
        target = add_months(today, offset)
        factor = seasonal_multiplier(target.month, policy.seasonality)
        points.append(ForecastPoint(
            product_id=product_id,
            date=target,
            predicted_demand=max(1, round_half_up(damped * factor)),
            confidence_score=rng.randint(policy.confidence_min, policy.confidence_max),
            model_type=policy.model_type
        ))

    return points
