from .aggregation import (
    SalesFact, SaleRecord, MonthlyTotal,
    group_sales_by_product, group_monthly_totals
)
from .history import (
    NegativeStockPolicy, HistoryPolicy, StockLedgerEntry,
    synthesize_history, draw_restock_amounts, opening_quantity, replay_ledger
)
from .demand_forecast import (
    ForecastPolicy, ForecastPoint, seasonal_multiplier,
    calculate_base_forecast, apply_damping, forecast_demand
)

__all__ = [
    'SalesFact',
    'SaleRecord',
    'MonthlyTotal',
    'group_sales_by_product',
    'group_monthly_totals',
    'NegativeStockPolicy',
    'HistoryPolicy',
    'StockLedgerEntry',
    'synthesize_history',
    'draw_restock_amounts',
    'opening_quantity',
    'replay_ledger',
    'ForecastPolicy',
    'ForecastPoint',
    'seasonal_multiplier',
    'calculate_base_forecast',
    'apply_damping',
    'forecast_demand'
]
