#!/usr/bin/env python3
"""Delete locations with no forecast in the last 30 days. Meant for cron."""

import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db import create_db_and_tables, get_session
from app.models import utcnow
from app.repositories.locations import cleanup_old_locations
from app.services.cache_policy import retention_cutoff

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    create_db_and_tables()

    cutoff = retention_cutoff(utcnow())
    print(f"Removing locations without forecasts since {cutoff.isoformat()}...")
    with get_session() as session:
        removed = cleanup_old_locations(session, cutoff)
    print(f"Done. Removed {removed} location(s).")
