# =============================================================================
# workers/config.py - Celery Settings
# =============================================================================
# Loaded with app.config_from_object("workers.config:CeleryConfig").
# Broker and backend URLs are passed in celery_app from settings.REDIS_URL.
# =============================================================================


class CeleryConfig:
    """Worker behaviour for admin review jobs."""

    # A job is re-delivered if the worker dies mid-batch; items already
    # reviewed fail the pending guard and are reported, not re-applied.
    task_acks_late = True
    worker_prefetch_multiplier = 1

    # Admins poll for results shortly after submitting
    result_expires = 60 * 60

    # A batch is capped at 200 items by BulkActionRequest
    task_soft_time_limit = 4 * 60
    task_time_limit = 5 * 60

    # Progress meta and results are plain dicts
    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # Review batches run apart from anything else queued later
    task_default_queue = "default"
    task_queues = {
        "default": {"exchange": "default", "routing_key": "default"},
        "admin_tasks": {"exchange": "admin_tasks", "routing_key": "admin_tasks"},
    }
    task_routes = {
        "workers.tasks.bulk_verify_items": {"queue": "admin_tasks"},
    }

    # Lets the API report STARTED instead of PENDING once a worker has it
    task_track_started = True
    worker_send_task_events = True
    task_send_sent_event = True

    timezone = "UTC"
    enable_utc = True
