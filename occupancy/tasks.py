# occupancy/tasks.py

from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task
def seed_missing_table_states():
    """
    Periodic task that gives newly catalogued tables an empty state row.
    Runs hourly via Celery Beat.

    Existing state rows, including their timestamps, are left untouched.
    """
    from occupancy.services.table_state import TableStateService

    seeded_count = TableStateService.seed_missing_states()

    logger.info(f"Seeded {seeded_count} table states")
    return {'seeded_count': seeded_count}
