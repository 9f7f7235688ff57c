"""
Shared fixtures for tests that need a database.
"""
import unittest
from datetime import datetime

from inventory_seeder.db import db, session_scope
from inventory_seeder.models import Category, Supplier, Product, Order, OrderItem, OrderStatus, new_uuid


class SqliteTestCase(unittest.TestCase):
    """Runs each test against a fresh in-memory SQLite database."""

    def setUp(self):
        db.initialize('sqlite://')
        db.create_all_tables()

        with session_scope() as session:
            self.category_id = new_uuid()
            self.supplier_id = new_uuid()
            session.add(Category(id=self.category_id, name='Garden'))
            session.add(Supplier(id=self.supplier_id, name='Acme', lead_time_days=7))

    def tearDown(self):
        db.drop_all_tables()

    def add_product(self, quantity=50, price=10.0):
        product_id = new_uuid()
        with session_scope() as session:
            session.add(Product(
                id=product_id,
                name=f'Product {product_id[:8]}',
                price=price,
                quantity=quantity,
                category_id=self.category_id,
                supplier_id=self.supplier_id
            ))
        return product_id

    def add_order(self, created_at, lines):
        """Add an order; lines is a list of (product_id, quantity)."""
        order_id = new_uuid()
        with session_scope() as session:
            order = Order(
                id=order_id,
                status=OrderStatus.DELIVERED,
                created_at=created_at,
                updated_at=created_at
            )
            for product_id, quantity in lines:
                order.items.append(OrderItem(
                    product_id=product_id,
                    quantity=quantity,
                    unit_price=10.0,
                    created_at=created_at
                ))
            session.add(order)
        return order_id


REFERENCE_NOW = datetime(2026, 10, 19, 12, 0, 0)
