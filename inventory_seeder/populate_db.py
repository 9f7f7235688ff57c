#!/usr/bin/env python
# populate_db.py - Populate the inventory database with sample catalogue and order data

import math
import random
import string
from datetime import datetime, timezone
from typing import Dict, List

from faker import Faker

from inventory_seeder.config import config
from inventory_seeder.core.demand_forecast import seasonal_multiplier
from inventory_seeder.db import session_scope
from inventory_seeder.exceptions import SeedingError
from inventory_seeder.models import (
    Category, Supplier, Product, Order, OrderItem,
    OrderStatus, PaymentStatus, ShippingMethod, new_uuid
)
from inventory_seeder.utils.date_utils import add_months
from inventory_seeder.logging_setup import get_logger

app_logger = get_logger('populate_db')

# Sample data constants
DEPARTMENTS = [
    'Electronics', 'Garden', 'Grocery', 'Toys', 'Books', 'Sports', 'Health',
    'Beauty', 'Automotive', 'Home', 'Clothing', 'Tools', 'Music', 'Outdoors'
]
PRODUCT_ADJECTIVES = [
    'Ergonomic', 'Rustic', 'Sleek', 'Handcrafted', 'Refined', 'Practical',
    'Intelligent', 'Generic', 'Gorgeous', 'Licensed', 'Modern', 'Tasty'
]
PRODUCT_MATERIALS = ['Steel', 'Wooden', 'Cotton', 'Granite', 'Plastic', 'Bronze', 'Rubber', 'Frozen']
PRODUCT_NOUNS = ['Chair', 'Table', 'Shoes', 'Gloves', 'Keyboard', 'Lamp', 'Bike', 'Soap', 'Towels', 'Hat']

ORDER_PRICE_MIN = 5.0
ORDER_PRICE_MAX = 500.0
ORDER_ITEM_QUANTITY = (1, 5)

def create_faker(rng: random.Random) -> Faker:
    """Create a Faker instance seeded from the run's random source."""
    fake = Faker()
    fake.seed_instance(rng.randint(0, 2 ** 31 - 1))
    return fake

def _product_name(rng: random.Random) -> str:
    return f"{rng.choice(PRODUCT_ADJECTIVES)} {rng.choice(PRODUCT_MATERIALS)} {rng.choice(PRODUCT_NOUNS)}"

def _sku(rng: random.Random) -> str:
    return ''.join(rng.choices(string.ascii_uppercase + string.digits, k=8))

def create_categories(rng: random.Random, fake: Faker, count: int = None) -> List[Dict]:
    """Create category records."""
    count = count if count is not None else config.seeding_config['categories']
    app_logger.info(f"Creating {count} categories...")

    categories = []
    with session_scope() as session:
        for _ in range(count):
            category = Category(
                id=new_uuid(),
                name=rng.choice(DEPARTMENTS),
                description=fake.sentence(nb_words=12)
            )
            session.add(category)
            categories.append({'id': category.id, 'name': category.name})

    return categories

def create_suppliers(rng: random.Random, fake: Faker, count: int = None) -> List[Dict]:
    """Create supplier records."""
    count = count if count is not None else config.seeding_config['suppliers']
    app_logger.info(f"Creating {count} suppliers...")

    suppliers = []
    with session_scope() as session:
        for _ in range(count):
            supplier = Supplier(
                id=new_uuid(),
                name=fake.company(),
                contact_name=fake.name(),
                email=fake.company_email(),
                phone=fake.phone_number(),
                address=fake.address().replace('\n', ', '),
                lead_time_days=rng.randint(3, 21),
                reliability_score=rng.randint(70, 100)
            )
            session.add(supplier)
            suppliers.append({
                'id': supplier.id,
                'name': supplier.name,
                'lead_time_days': supplier.lead_time_days
            })

    return suppliers

def create_products(
    rng: random.Random,
    fake: Faker,
    categories: List[Dict],
    suppliers: List[Dict],
    per_category: int = None
) -> List[Dict]:
    """Create product records for every category.

    Each product is tied to a random supplier and inherits its lead time.
    """
    if not categories or not suppliers:
        raise SeedingError("Products need at least one category and one supplier")

    per_category = per_category if per_category is not None else config.seeding_config['products_per_category']
    app_logger.info(f"Creating {per_category} products for each of {len(categories)} categories...")

    products = []
    with session_scope() as session:
        for category in categories:
            for _ in range(per_category):
                supplier = rng.choice(suppliers)
                product = Product(
                    id=new_uuid(),
                    name=_product_name(rng),
                    description=fake.sentence(nb_words=15),
                    price=round(rng.uniform(ORDER_PRICE_MIN, ORDER_PRICE_MAX), 2),
                    quantity=rng.randint(0, 200),
                    category_id=category['id'],
                    sku=_sku(rng),
                    low_stock_threshold=rng.randint(5, 20),
                    supplier_id=supplier['id'],
                    lead_time_days=supplier['lead_time_days']
                )
                session.add(product)
                products.append({
                    'id': product.id,
                    'name': product.name,
                    'price': product.price,
                    'sku': product.sku,
                    'category_id': category['id']
                })

    return products

def monthly_order_count(rng: random.Random, orders_per_month: int, month: int, seasonality: Dict[int, float] = None) -> int:
    """Number of orders to create for a calendar month.

    Draws 80-120% of the nominal volume, then applies the seasonal multiplier.
    """
    base = rng.randint(int(orders_per_month * 0.8), int(orders_per_month * 1.2))
    return int(math.floor(base * seasonal_multiplier(month, seasonality)))

def create_historical_orders(
    rng: random.Random,
    fake: Faker,
    products: List[Dict],
    months: int = None,
    orders_per_month: int = None,
    max_order_items: int = None,
    now: datetime = None
) -> Dict:
    """Create orders and order items for each month of the historical window.

    Args:
        rng: Random source
        fake: Faker instance
        products: Products to sell
        months: Number of months back from now (the current month is included)
        orders_per_month: Nominal orders per month before seasonality
        max_order_items: Maximum distinct products per order
        now: Reference time

    Returns:
        Dictionary with created order and item counts
    """
    settings = config.seeding_config
    months = months if months is not None else settings['historical_months']
    orders_per_month = orders_per_month if orders_per_month is not None else settings['orders_per_month']
    max_order_items = max_order_items if max_order_items is not None else settings['max_order_items']
    now = now or datetime.now(timezone.utc)

    if not products:
        raise SeedingError("Cannot create orders without products")

    results = {'orders_created': 0, 'items_created': 0}

    for month in range(months, -1, -1):
        month_date = add_months(now, -month)
        order_count = monthly_order_count(rng, orders_per_month, month_date.month, config.seasonality)
        app_logger.info(f"  - Creating {order_count} orders for {month_date.strftime('%B %Y')}...")

        with session_scope() as session:
            for _ in range(order_count):
                # Days 1-28 exist in every month
                order_day = month_date.replace(day=rng.randint(1, 28))

                order = Order(
                    id=new_uuid(),
                    status=rng.choice(list(OrderStatus)),
                    customer_name=fake.name(),
                    customer_email=fake.email(),
                    shipping_address=fake.address().replace('\n', ', '),
                    shipping_method=rng.choice(list(ShippingMethod)),
                    notes=fake.sentence() if rng.random() > 0.7 else None,
                    payment_status=rng.choice(list(PaymentStatus)),
                    created_at=order_day,
                    updated_at=order_day
                )

                item_count = min(rng.randint(1, max_order_items), len(products))
                total_amount = 0.0
                for product in rng.sample(products, item_count):
                    quantity = rng.randint(*ORDER_ITEM_QUANTITY)
                    total_amount += product['price'] * quantity
                    order.items.append(OrderItem(
                        id=new_uuid(),
                        product_id=product['id'],
                        quantity=quantity,
                        unit_price=product['price'],
                        created_at=order_day
                    ))
                    results['items_created'] += 1

                order.total_amount = round(total_amount, 2)
                session.add(order)
                results['orders_created'] += 1

    return results

def seed_reference_data(rng: random.Random, fake: Faker = None) -> Dict:
    """Create categories, suppliers and products.

    Returns:
        Dictionary with the created categories, suppliers and products
    """
    fake = fake or create_faker(rng)
    categories = create_categories(rng, fake)
    suppliers = create_suppliers(rng, fake)
    products = create_products(rng, fake, categories, suppliers)
    return {
        'categories': categories,
        'suppliers': suppliers,
        'products': products
    }
