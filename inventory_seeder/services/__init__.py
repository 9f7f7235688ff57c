from .repositories import ProductRepository, SalesRepository
from .history_service import HistoryService
from .forecast_service import ForecastService

__all__ = [
    'ProductRepository',
    'SalesRepository',
    'HistoryService',
    'ForecastService'
]
