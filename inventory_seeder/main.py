import argparse
import logging
import sys

from inventory_seeder.config import config
from inventory_seeder.db import db
from inventory_seeder.logging_setup import logger, get_logger
from inventory_seeder.exceptions import SeederError

COMMAND_STEPS = {
    'all': ['schema', 'seed', 'history', 'forecast'],
    'schema': ['schema'],
    'seed': ['schema', 'seed'],
    'history': ['history'],
    'forecast': ['forecast'],
    'derived': ['history', 'forecast'],
}

def init_application(database_url=None):
    """Initialize application components."""
    db.initialize(database_url)
    db.check_connection()

    log = logger.app_logger
    log.info("Inventory seeder initialized")
    if database_url is None:
        log.info(f"Using database: {config.get('DATABASE', 'engine')} at {config.get('DATABASE', 'host')}:{config.get('DATABASE', 'port')}")
        log.info(f"Database name: {config.get('DATABASE', 'database')}")

    return True

def build_parser():
    parser = argparse.ArgumentParser(
        description='Populate the inventory database with demo data, stock history and forecasts'
    )
    parser.add_argument(
        'command',
        nargs='?',
        default='all',
        choices=sorted(COMMAND_STEPS),
        help='What to run (default: all)'
    )
    parser.add_argument('--seed', type=int, help='Random seed for a reproducible run')
    parser.add_argument('--database-url', help='SQLAlchemy URL overriding the configured database')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    return parser

def print_results(results, log):
    """Log a per-step summary of a job result."""
    for process_name, process_result in results.get('processes', {}).items():
        log.info(f"Process '{process_name}': {process_result.get('success', False)}")

        for key in ('products_created', 'orders_created', 'rows_created', 'skipped'):
            if process_result.get(key):
                log.info(f"  {key.replace('_', ' ').capitalize()}: {process_result[key]}")

        if process_result.get('error_products'):
            log.warning(f"  Failed products: {', '.join(process_result['error_products'])}")

def main(argv=None):
    """Run the seeder from the command line."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logger.set_level(logging.DEBUG)

    log = get_logger('seed_job_runner')

    try:
        init_application(args.database_url)

        # Deferred so that --database-url is applied before any session is opened
        from inventory_seeder.batch.seed_job import run_seed_job

        results = run_seed_job(COMMAND_STEPS[args.command], seed=args.seed)
    except SeederError as e:
        log.error(f"Seeder failed: {str(e)}")
        return 1

    if results.get('success', False):
        log.info("Seed job completed successfully")
        log.info(f"Duration: {results.get('duration')}")
        print_results(results, log)
        return 0

    log.error(f"Seed job failed: {results.get('error', 'one or more products failed')}")
    print_results(results, log)
    return 1

if __name__ == "__main__":
    sys.exit(main())
