"""
Tests for the seed job batch steps.
"""
import random
import unittest
from datetime import datetime
from unittest.mock import patch, PropertyMock

from inventory_seeder.batch import seed_job
from inventory_seeder.config import Config
from inventory_seeder.db import session_scope
from inventory_seeder.exceptions import BatchProcessError, DatabaseError
from inventory_seeder.main import main
from inventory_seeder.models import ChangeType, Forecast, Order, Product, ProductHistory
from inventory_seeder.services.history_service import HistoryService
from inventory_seeder.tests.base import SqliteTestCase, REFERENCE_NOW

SMALL_SEEDING = {
    'categories': 2,
    'products_per_category': 3,
    'suppliers': 2,
    'historical_months': 2,
    'orders_per_month': 5,
    'max_order_items': 2,
    'random_seed': None
}

SMALL_HISTORY = {
    'window_months': 2,
    'restock_min': 10,
    'restock_max': 100,
    'negative_stock_policy': 'clamp'
}


class TestGenerateProductHistory(SqliteTestCase):

    def setUp(self):
        super().setUp()
        self.history_patcher = patch.object(
            Config, 'history_config', new_callable=PropertyMock, return_value=SMALL_HISTORY
        )
        self.history_patcher.start()

        self.good_id = self.add_product(quantity=40)
        self.bad_id = self.add_product(quantity=25)
        self.idle_id = self.add_product(quantity=10)
        self.add_order(datetime(2026, 9, 1, 10, 0), [(self.good_id, 4), (self.bad_id, 2)])
        self.add_order(datetime(2026, 10, 2, 10, 0), [(self.good_id, 1)])

    def tearDown(self):
        self.history_patcher.stop()
        super().tearDown()

    def history_ids(self, product_id):
        with session_scope() as session:
            return sorted(
                row.id for row in session.query(ProductHistory).filter(
                    ProductHistory.product_id == product_id
                )
            )

    def test_every_product_gets_a_ledger(self):
        results = seed_job.generate_product_history(random.Random(1), now=REFERENCE_NOW)

        self.assertTrue(results['success'])
        self.assertEqual(results['total_products'], 3)
        self.assertEqual(results['processed'], 3)
        self.assertEqual(results['rows_created'], 3 * 3 + 3)

        with session_scope() as session:
            idle_rows = session.query(ProductHistory).filter(
                ProductHistory.product_id == self.idle_id
            ).all()
            self.assertEqual(len(idle_rows), 3)
            self.assertTrue(all(row.change_type == ChangeType.RESTOCK for row in idle_rows))

    def test_failed_product_is_rolled_back_and_reported(self):
        seed_job.generate_product_history(random.Random(1), now=REFERENCE_NOW)
        bad_before = self.history_ids(self.bad_id)
        good_before = self.history_ids(self.good_id)

        original_replace = HistoryService.replace_history

        def failing_replace(service, product_id, entries):
            written = original_replace(service, product_id, entries)
            if product_id == self.bad_id:
                raise DatabaseError("insert failed")
            return written

        with patch.object(HistoryService, 'replace_history', autospec=True, side_effect=failing_replace):
            results = seed_job.generate_product_history(random.Random(2), now=REFERENCE_NOW)

        self.assertFalse(results['success'])
        self.assertEqual(results['errors'], 1)
        self.assertEqual(results['error_products'], [self.bad_id])
        self.assertEqual(results['processed'], 2)

        # The failed product keeps its previous ledger, the others are rewritten
        self.assertEqual(self.history_ids(self.bad_id), bad_before)
        self.assertNotEqual(self.history_ids(self.good_id), good_before)
        self.assertEqual(len(self.history_ids(self.good_id)), len(good_before))

    def test_selected_products_only(self):
        results = seed_job.generate_product_history(random.Random(1), product_ids=[self.good_id], now=REFERENCE_NOW)

        self.assertEqual(results['total_products'], 1)
        self.assertEqual(self.history_ids(self.bad_id), [])


class TestGenerateForecasts(SqliteTestCase):

    def test_forecasts_only_for_products_with_sales(self):
        selling_id = self.add_product(quantity=40)
        idle_id = self.add_product(quantity=10)
        self.add_order(datetime(2026, 9, 1, 10, 0), [(selling_id, 4)])

        results = seed_job.generate_forecasts(random.Random(1))

        self.assertTrue(results['success'])
        self.assertEqual(results['processed'], 1)
        self.assertEqual(results['skipped'], 1)
        self.assertEqual(results['rows_created'], 3)

        with session_scope() as session:
            self.assertEqual(session.query(Forecast).filter(Forecast.product_id == selling_id).count(), 3)
            self.assertEqual(session.query(Forecast).filter(Forecast.product_id == idle_id).count(), 0)

    def test_rerun_replaces_forecasts(self):
        selling_id = self.add_product(quantity=40)
        self.add_order(datetime(2026, 9, 1, 10, 0), [(selling_id, 4)])

        seed_job.generate_forecasts(random.Random(1))
        seed_job.generate_forecasts(random.Random(2))

        with session_scope() as session:
            self.assertEqual(session.query(Forecast).count(), 3)


class TestRunSeedJob(SqliteTestCase):

    def setUp(self):
        super().setUp()
        self.patchers = [
            patch.object(Config, 'seeding_config', new_callable=PropertyMock, return_value=SMALL_SEEDING),
            patch.object(Config, 'history_config', new_callable=PropertyMock, return_value=SMALL_HISTORY),
        ]
        for patcher in self.patchers:
            patcher.start()

    def tearDown(self):
        for patcher in self.patchers:
            patcher.stop()
        super().tearDown()

    def test_full_run(self):
        results = seed_job.run_seed_job(seed=42)

        self.assertTrue(results['success'])
        self.assertEqual(list(results['processes']), ['schema', 'seed', 'history', 'forecast'])

        seeded = results['processes']['seed']
        self.assertEqual(seeded['categories_created'], 2)
        self.assertEqual(seeded['suppliers_created'], 2)
        self.assertEqual(seeded['products_created'], 6)
        self.assertGreater(seeded['orders_created'], 0)

        with session_scope() as session:
            product_count = session.query(Product).count()
            order_count = session.query(Order).count()
            restocks = session.query(ProductHistory).filter(
                ProductHistory.change_type == ChangeType.RESTOCK
            ).count()
            forecasts = session.query(Forecast).count()

        # The setUp category/supplier have no products
        self.assertEqual(product_count, 6)
        self.assertEqual(order_count, seeded['orders_created'])
        self.assertEqual(restocks, 6 * 3)
        self.assertEqual(forecasts, 3 * results['processes']['forecast']['processed'])
        self.assertEqual(seed_job.failed_products(results), [])

    def test_unknown_step(self):
        with self.assertRaises(BatchProcessError):
            seed_job.run_seed_job(steps=['schema', 'teleport'])

    def test_step_failure_is_reported(self):
        with patch.object(seed_job, 'create_schema', side_effect=RuntimeError("no database")):
            results = seed_job.run_seed_job(steps=['schema'])

        self.assertFalse(results['success'])
        self.assertIn('no database', results['error'])

    def test_failed_products_collects_unique_ids(self):
        results = {'processes': {
            'history': {'error_products': ['a', 'b']},
            'forecast': {'error_products': ['b', 'c']},
        }}
        self.assertEqual(seed_job.failed_products(results), ['a', 'b', 'c'])


class TestCommandLine(unittest.TestCase):

    def test_schema_command(self):
        self.assertEqual(main(['schema', '--database-url', 'sqlite://']), 0)

    def test_reports_failure(self):
        with patch('inventory_seeder.batch.seed_job.run_seed_job', return_value={'success': False, 'processes': {}}):
            self.assertEqual(main(['history', '--database-url', 'sqlite://']), 1)


if __name__ == '__main__':
    unittest.main()
