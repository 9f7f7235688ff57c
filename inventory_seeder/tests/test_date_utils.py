import unittest
from datetime import date, datetime

from inventory_seeder.utils.date_utils import add_months, months_ago, month_start, month_range, to_date
from inventory_seeder.utils.math_utils import round_half_up, mean
from inventory_seeder.exceptions import ValidationError


class TestDateUtils(unittest.TestCase):

    def test_add_months_clamps_day(self):
        self.assertEqual(add_months(date(2026, 3, 31), -1), date(2026, 2, 28))
        self.assertEqual(add_months(date(2024, 3, 31), -1), date(2024, 2, 29))

    def test_add_months_crosses_years(self):
        self.assertEqual(add_months(date(2026, 1, 15), -13), date(2024, 12, 15))
        self.assertEqual(add_months(date(2026, 11, 15), 3), date(2027, 2, 15))

    def test_add_months_keeps_time(self):
        self.assertEqual(
            add_months(datetime(2026, 10, 19, 12, 30), -2),
            datetime(2026, 8, 19, 12, 30)
        )

    def test_months_ago(self):
        self.assertEqual(months_ago(12, today=date(2026, 10, 19)), date(2025, 10, 19))

    def test_month_start_and_range(self):
        self.assertEqual(month_start(datetime(2026, 5, 17, 8, 0)), date(2026, 5, 1))
        self.assertEqual(
            month_range(date(2026, 11, 20), 3),
            [date(2026, 11, 1), date(2026, 12, 1), date(2027, 1, 1)]
        )

    def test_to_date(self):
        self.assertEqual(to_date(datetime(2026, 5, 17, 8, 0)), date(2026, 5, 17))
        self.assertEqual(to_date(date(2026, 5, 17)), date(2026, 5, 17))


class TestMathUtils(unittest.TestCase):

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(3.5), 4)
        self.assertEqual(round_half_up(2.49), 2)
        self.assertEqual(round_half_up(0.7), 1)

    def test_mean(self):
        self.assertEqual(mean([10, 14]), 12.0)
        with self.assertRaises(ValidationError):
            mean([])


if __name__ == '__main__':
    unittest.main()
