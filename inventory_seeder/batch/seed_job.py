# inventory_seeder/batch/seed_job.py
import random
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from inventory_seeder.config import config
from inventory_seeder.db import db, session_scope
from inventory_seeder.populate_db import create_faker, create_historical_orders, seed_reference_data
from inventory_seeder.services.forecast_service import ForecastService
from inventory_seeder.services.history_service import HistoryService
from inventory_seeder.services.repositories import ProductRepository, SalesRepository
from inventory_seeder.exceptions import BatchProcessError, SeederError
from inventory_seeder.logging_setup import get_logger, log_exception, logger as log_manager

# Initialize logger
logger = get_logger('seed_job')

STEPS = ('schema', 'seed', 'history', 'forecast')

def make_rng(seed: Optional[int] = None) -> random.Random:
    """Create the random source shared by every step of a run."""
    if seed is None:
        seed = config.seeding_config['random_seed']
    return random.Random(seed)

def create_schema() -> Dict:
    """Create all tables that do not exist yet."""
    logger.info("Creating tables")
    db.create_all_tables()
    return {'success': True}

def seed_catalogue_and_orders(rng: random.Random) -> Dict:
    """Seed categories, suppliers, products and historical orders.

    Args:
        rng: Random source

    Returns:
        Dictionary with seeding results
    """
    fake = create_faker(rng)
    reference = seed_reference_data(rng, fake)
    order_results = create_historical_orders(rng, fake, reference['products'])

    return {
        'success': True,
        'categories_created': len(reference['categories']),
        'suppliers_created': len(reference['suppliers']),
        'products_created': len(reference['products']),
        'orders_created': order_results['orders_created'],
        'items_created': order_results['items_created']
    }

def _load_products_and_sales(product_ids: Optional[Iterable[str]]) -> Dict:
    with session_scope() as session:
        ids = list(product_ids) if product_ids is not None else ProductRepository(session).list_product_ids()
        grouped = SalesRepository(session).load_all()
    grouped['product_ids'] = ids
    return grouped

def _new_results(total: int) -> Dict:
    return {
        'total_products': total,
        'processed': 0,
        'rows_created': 0,
        'skipped': 0,
        'errors': 0,
        'error_products': []
    }

def generate_product_history(
    rng: random.Random,
    product_ids: Optional[Iterable[str]] = None,
    now: datetime = None
) -> Dict:
    """Rebuild the stock ledger of every product.

    Each product is written in its own transaction. A product that fails
    is rolled back, logged and listed in error_products; the rest carry on.

    Args:
        rng: Random source
        product_ids: Optional product IDs (defaults to all products)
        now: Reference time for restock dates

    Returns:
        Dictionary with history results
    """
    logger.info("Generating product stock history")
    data = _load_products_and_sales(product_ids)
    results = _new_results(len(data['product_ids']))

    for product_id in data['product_ids']:
        try:
            with session_scope() as session:
                service = HistoryService(session)
                entries = service.build_history(
                    product_id, rng, sales=data['sales'].get(product_id, []), now=now
                )
                results['rows_created'] += service.replace_history(product_id, entries)
            results['processed'] += 1
        except (SeederError, SQLAlchemyError) as e:
            logger.error(f"Error generating history for product {product_id}: {str(e)}")
            results['errors'] += 1
            results['error_products'].append(product_id)

    results['success'] = results['errors'] == 0
    logger.info(
        f"History generated for {results['processed']} of {results['total_products']} products "
        f"({results['rows_created']} rows, {results['errors']} errors)"
    )
    return results

def generate_forecasts(
    rng: random.Random,
    product_ids: Optional[Iterable[str]] = None,
    today=None
) -> Dict:
    """Rebuild the demand forecast of every product with sales history.

    Args:
        rng: Random source
        product_ids: Optional product IDs (defaults to all products)
        today: Reference date for forecast months

    Returns:
        Dictionary with forecast results
    """
    logger.info("Generating forecasts")
    data = _load_products_and_sales(product_ids)
    results = _new_results(len(data['product_ids']))

    for product_id in data['product_ids']:
        monthly_totals = data['monthly_totals'].get(product_id, [])
        try:
            with session_scope() as session:
                service = ForecastService(session)
                points = service.build_forecast(product_id, rng, monthly_totals=monthly_totals, today=today)
                results['rows_created'] += service.replace_forecast(product_id, points)
            if points:
                results['processed'] += 1
            else:
                results['skipped'] += 1
        except (SeederError, SQLAlchemyError) as e:
            logger.error(f"Error generating forecast for product {product_id}: {str(e)}")
            results['errors'] += 1
            results['error_products'].append(product_id)

    results['success'] = results['errors'] == 0
    logger.info(
        f"Forecasts generated for {results['processed']} products, "
        f"{results['skipped']} without sales history, {results['errors']} errors"
    )
    return results

def _run_step(name: str, func, *args, **kwargs) -> Dict:
    log_info = log_manager.batch_start_log(name)
    try:
        result = func(*args, **kwargs)
    except Exception as e:
        log_exception('seed_job', e, f"Step '{name}' failed")
        log_manager.batch_end_log(log_info, success=False)
        raise BatchProcessError(f"Step '{name}' failed: {str(e)}", details={'step': name})
    log_manager.batch_end_log(log_info, success=result.get('success', True), result_info=result)
    return result

def run_seed_job(steps: Iterable[str] = STEPS, seed: Optional[int] = None) -> Dict:
    """Run the seeding job.

    Args:
        steps: Steps to run, in pipeline order (schema, seed, history, forecast)
        seed: Optional random seed for a reproducible run

    Returns:
        Dictionary with job results
    """
    steps = list(steps)
    unknown = [step for step in steps if step not in STEPS]
    if unknown:
        raise BatchProcessError(f"Unknown steps: {', '.join(unknown)}")

    start_time = datetime.now()
    logger.info(f"Starting seed job at {start_time} with steps {steps}")

    rng = make_rng(seed)
    results = {
        'start_time': start_time,
        'end_time': None,
        'duration': None,
        'processes': {}
    }

    try:
        if 'schema' in steps:
            results['processes']['schema'] = _run_step('schema', create_schema)

        if 'seed' in steps:
            results['processes']['seed'] = _run_step('seed', seed_catalogue_and_orders, rng)

        if 'history' in steps:
            results['processes']['history'] = _run_step('history', generate_product_history, rng)

        if 'forecast' in steps:
            results['processes']['forecast'] = _run_step('forecast', generate_forecasts, rng)

        results['success'] = all(
            process.get('success', False) for process in results['processes'].values()
        )

    except BatchProcessError as e:
        logger.error(f"Error during seed job: {str(e)}", exc_info=True)
        results['success'] = False
        results['error'] = str(e)

    results['end_time'] = datetime.now()
    results['duration'] = results['end_time'] - start_time
    logger.info(f"Seed job finished in {results['duration']} (success={results['success']})")
    return results

def failed_products(results: Dict) -> List[str]:
    """Collect product IDs that failed in any step of a job result."""
    failed = []
    for process in results.get('processes', {}).values():
        for product_id in process.get('error_products', []):
            if product_id not in failed:
                failed.append(product_id)
    return failed
