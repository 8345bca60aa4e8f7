# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background processing of admin review batches.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (bulk verification)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker -Q default,admin_tasks --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import bulk_verify_items
#   result = bulk_verify_items.delay(item_ids, "approve")
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
