# minishop/celery_worker.py
from celery import Celery

from minishop.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    RECONCILE_INTERVAL_SECONDS,
    SESSION_RECONCILIATION_ENABLED,
)

celery_app = Celery(
    "minishop",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks must be imported explicitly for the worker to register them
celery_app.conf.imports = (
    "minishop.tasks.reconcile",
)

celery_app.conf.beat_schedule = {}
if SESSION_RECONCILIATION_ENABLED:
    celery_app.conf.beat_schedule["reconcile-checkout-sessions"] = {
        "task": "minishop.tasks.reconcile.reconcile_sessions_task",
        "schedule": float(RECONCILE_INTERVAL_SECONDS),
    }

celery_app.conf.timezone = "UTC"
