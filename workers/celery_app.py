# =============================================================================
# workers/celery_app.py - Celery Application
# =============================================================================
# The worker process for LearnConnect background jobs. Redis is both broker
# and result backend so the API can poll task state.
#
# Usage:
#   celery -A workers.celery_app worker -Q default,admin_tasks --loglevel=info
# =============================================================================

import logging
import time

from celery import Celery
from celery.signals import task_failure, task_postrun, task_prerun
from dotenv import load_dotenv

# Worker processes are started outside uvicorn; pick up .env before settings
load_dotenv()

from app.config import settings  # noqa: E402

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# task_id -> monotonic start time
_started: dict[str, float] = {}


def _redacted(url: str) -> str:
    """Broker URL without credentials, for logs."""
    return url.split("@")[-1] if "@" in url else url


def create_celery_app() -> Celery:
    """
    Build the Celery app from settings and workers.config.CeleryConfig.
    """
    app = Celery(
        "learnconnect_worker",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=["workers.tasks"],
    )
    app.config_from_object("workers.config:CeleryConfig")

    logger.info(f"Celery app ready, broker {_redacted(settings.REDIS_URL)}")
    return app


celery_app = create_celery_app()


@celery_app.task(bind=True, name="workers.healthcheck")
def healthcheck(self):
    """Returns "OK" when a worker picks it up."""
    return "OK"


# =============================================================================
# Task lifecycle logging
# =============================================================================

@task_prerun.connect
def log_task_start(sender=None, task_id=None, task=None, args=None, **extra):
    _started[task_id] = time.monotonic()
    batch = len(args[0]) if args and isinstance(args[0], list) else None
    suffix = f" ({batch} items)" if batch is not None else ""
    logger.info(f"{task.name} [{task_id}] started{suffix}")


@task_postrun.connect
def log_task_end(sender=None, task_id=None, task=None, state=None, **extra):
    elapsed = time.monotonic() - _started.pop(task_id, time.monotonic())
    logger.info(f"{task.name} [{task_id}] {state} in {elapsed:.2f}s")


@task_failure.connect
def log_task_failure(sender=None, task_id=None, exception=None, **extra):
    logger.error(f"{sender.name} [{task_id}] failed: {exception}")


if __name__ == "__main__":
    celery_app.start()
