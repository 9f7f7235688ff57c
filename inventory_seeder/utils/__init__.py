from .date_utils import add_months, months_ago, month_start, to_date, month_range
from .math_utils import round_half_up, mean, random_between

__all__ = [
    'add_months',
    'months_ago',
    'month_start',
    'to_date',
    'month_range',
    'round_half_up',
    'mean',
    'random_between'
]
