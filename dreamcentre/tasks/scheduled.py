"""
Scheduled Supabase housekeeping.

Calls the publish_scheduled_events and archive_past_events database functions
in that order. Meant to be triggered by cron:

    python -m dreamcentre.tasks.scheduled

Exits 1 when SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY are missing or an
unexpected error escapes the run, 0 otherwise (per-procedure failures are
logged and do not change the exit code).
"""
import logging
import sys
from typing import List, NamedTuple, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from dreamcentre.config import ConfigurationError, load_task_settings
from dreamcentre.database import create_service_client

logger = logging.getLogger(__name__)


class TaskOutcome(NamedTuple):
    name: str
    error: Optional[str] = None


# (procedure, success marker, error prefix)
SCHEDULED_PROCEDURES = (
    ("publish_scheduled_events", "✓ Published scheduled events", "Error publishing scheduled events"),
    ("archive_past_events", "✓ Archived past events", "Error archiving past events"),
)


def call_procedure(client: Client, name: str) -> TaskOutcome:
    """Invoke one database function; remote errors are returned, not raised"""
    try:
        client.rpc(name).execute()
    except (APIError, httpx.HTTPError) as e:
        return TaskOutcome(name, str(e) or type(e).__name__)
    return TaskOutcome(name)


def run_scheduled_tasks(client: Client) -> List[TaskOutcome]:
    """Run both procedures in order; a failure in one never skips the other"""
    logger.info("Running scheduled tasks...")

    outcomes = []
    for name, success_marker, error_prefix in SCHEDULED_PROCEDURES:
        outcome = call_procedure(client, name)
        if outcome.error is not None:
            logger.error(f"{error_prefix}: {outcome.error}")
        else:
            logger.info(success_marker)
        outcomes.append(outcome)

    logger.info("Scheduled tasks completed successfully!")
    return outcomes


def run_scheduled_job():
    """APScheduler entry point: never lets an exception reach the scheduler thread"""
    try:
        settings = load_task_settings()
        run_scheduled_tasks(
            create_service_client(settings.supabase_url, settings.supabase_service_role_key)
        )
    except Exception:
        logger.exception("Error running scheduled tasks")


def main() -> int:
    """Process entry point, returns the exit code"""
    try:
        settings = load_task_settings()
    except ConfigurationError as e:
        logger.error("Missing required environment variables")
        logger.error(str(e))
        return 1

    try:
        client = create_service_client(settings.supabase_url, settings.supabase_service_role_key)
        run_scheduled_tasks(client)
    except Exception:
        logger.exception("Error running scheduled tasks")
        return 1

    return 0


def cli():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    sys.exit(main())


if __name__ == "__main__":
    cli()
