"""
Tests for configuration parsing, the error hierarchy and catalogue seeding.
"""
import configparser
import os
import random
import unittest
from datetime import datetime
from unittest.mock import patch

from inventory_seeder.config import Config, DEFAULT_SEASONALITY
from inventory_seeder.db import session_scope
from inventory_seeder.exceptions import SeederError, DatabaseError, SeedingError
from inventory_seeder.models import Order, OrderItem, Product
from inventory_seeder.populate_db import (
    create_faker, create_products, create_historical_orders, monthly_order_count
)
from inventory_seeder.tests.base import SqliteTestCase


def config_from_string(text):
    """Build a Config that reads from a string instead of settings.ini."""
    cfg = object.__new__(Config)
    cfg._config = configparser.ConfigParser(interpolation=None)
    cfg._config.read_string(text)
    return cfg


class TestConfig(unittest.TestCase):

    def test_typed_accessors_fall_back_to_defaults(self):
        cfg = config_from_string("[FORECAST]\nhorizon_months = six\n")

        self.assertEqual(cfg.get_int('FORECAST', 'horizon_months', 3), 3)
        self.assertEqual(cfg.get('MISSING', 'key', 'fallback'), 'fallback')
        self.assertEqual(cfg.forecast_config['horizon_months'], 3)

    def test_seasonality_overrides_single_month(self):
        cfg = config_from_string("[SEASONALITY]\n12 = 2.0\n")

        seasonality = cfg.seasonality
        self.assertEqual(seasonality[12], 2.0)
        self.assertEqual(seasonality[1], DEFAULT_SEASONALITY[1])
        self.assertEqual(sorted(seasonality), list(range(1, 13)))

    def test_random_seed_parsing(self):
        self.assertIsNone(config_from_string("[SEEDING]\nrandom_seed =\n").seeding_config['random_seed'])
        self.assertEqual(config_from_string("[SEEDING]\nrandom_seed = 42\n").seeding_config['random_seed'], 42)

    def test_history_window_follows_historical_months(self):
        cfg = config_from_string("[SEEDING]\nhistorical_months = 6\n[HISTORY]\nnegative_stock_policy = allow\n")

        self.assertEqual(cfg.history_config['window_months'], 6)
        self.assertEqual(cfg.history_config['negative_stock_policy'], 'allow')

    def test_db_url_quotes_password(self):
        cfg = config_from_string(
            "[DATABASE]\nengine = postgresql\nhost = db\nport = 5432\n"
            "database = inventory\nusername = seeder\npassword = p@ss:word\n"
        )
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(cfg.get_db_url(), "postgresql://seeder:p%40ss%3Aword@db:5432/inventory")

    def test_database_url_environment_wins(self):
        cfg = config_from_string("[DATABASE]\nhost = db\n")
        with patch.dict(os.environ, {'DATABASE_URL': 'sqlite://'}):
            self.assertEqual(cfg.get_db_url(), 'sqlite://')


class TestExceptions(unittest.TestCase):

    def test_str_includes_code(self):
        self.assertEqual(str(SeederError("boom", code='E42')), "[E42] boom")
        self.assertEqual(str(DatabaseError()), "Database error")

    def test_to_dict(self):
        error = SeedingError("no suppliers", code='SEED', details={'count': 0})
        self.assertEqual(error.to_dict(), {
            'error': 'SeedingError',
            'message': 'no suppliers',
            'code': 'SEED',
            'details': {'count': 0}
        })


class TestMonthlyOrderCount(unittest.TestCase):

    def test_seasonal_volume(self):
        for seed in range(20):
            december = monthly_order_count(random.Random(seed), 100, 12)
            january = monthly_order_count(random.Random(seed), 100, 1)
            self.assertTrue(120 <= december <= 180)
            self.assertTrue(56 <= january <= 84)


class TestPopulateDb(SqliteTestCase):

    def test_products_need_suppliers(self):
        rng = random.Random(1)
        with self.assertRaises(SeedingError):
            create_products(rng, create_faker(rng), [{'id': self.category_id}], [])

    def test_products_inherit_supplier_lead_time(self):
        rng = random.Random(1)
        suppliers = [{'id': self.supplier_id, 'name': 'Acme', 'lead_time_days': 9}]
        created = create_products(rng, create_faker(rng), [{'id': self.category_id}], suppliers, per_category=4)

        self.assertEqual(len(created), 4)
        with session_scope() as session:
            products = session.query(Product).all()
            self.assertEqual({p.lead_time_days for p in products}, {9})
            self.assertEqual({p.supplier_id for p in products}, {self.supplier_id})
            self.assertTrue(all(0 <= p.quantity <= 200 for p in products))

    def test_historical_orders(self):
        rng = random.Random(5)
        fake = create_faker(rng)
        products = [{'id': self.add_product(quantity=10, price=2.5), 'price': 2.5} for _ in range(3)]

        results = create_historical_orders(
            rng, fake, products, months=2, orders_per_month=10, max_order_items=2,
            now=datetime(2026, 10, 19, 12, 0, 0)
        )

        with session_scope() as session:
            orders = session.query(Order).all()
            items = session.query(OrderItem).all()
            self.assertEqual(len(orders), results['orders_created'])
            self.assertEqual(len(items), results['items_created'])
            self.assertEqual({o.created_at.month for o in orders}, {8, 9, 10})
            for order in orders:
                self.assertTrue(1 <= len(order.items) <= 2)
                expected_total = sum(item.unit_price * item.quantity for item in order.items)
                self.assertAlmostEqual(order.total_amount, expected_total, places=2)

    def test_orders_need_products(self):
        rng = random.Random(1)
        with self.assertRaises(SeedingError):
            create_historical_orders(rng, create_faker(rng), [], months=1, orders_per_month=1, max_order_items=1)


if __name__ == '__main__':
    unittest.main()
