#!/usr/bin/env python
# run_seed_job.py - Script to run the inventory seed job

import sys
from pathlib import Path

# Add the package directory to the path so the script runs from a checkout
parent_dir = str(Path(__file__).parent)
if parent_dir not in sys.path:
    sys.path.append(parent_dir)

from inventory_seeder.main import main

if __name__ == "__main__":
    sys.exit(main())
