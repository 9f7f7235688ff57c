# inventory_seeder/batch/__init__.py

from .seed_job import (
    run_seed_job,
    create_schema,
    seed_catalogue_and_orders,
    generate_product_history,
    generate_forecasts,
    failed_products,
    make_rng,
    STEPS
)

__all__ = [
    'run_seed_job',
    'create_schema',
    'seed_catalogue_and_orders',
    'generate_product_history',
    'generate_forecasts',
    'failed_products',
    'make_rng',
    'STEPS'
]
