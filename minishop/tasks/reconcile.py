# minishop/tasks/reconcile.py
import time

from sqlalchemy.orm import Session

from minishop.celery_worker import celery_app
from minishop.data.database import SessionLocal
from minishop.domain.errors import UpstreamError
from minishop.repos.order_repo import OrderRepo
from minishop.services.payment_gateway import StripeGateway
from minishop.services.session_ledger import SessionLedger
from minishop.utils.settings import ORPHAN_GRACE_SECONDS
from minishop.utils.logging import get_logger

logger = get_logger(__name__)


def reconcile_orphaned_sessions(
    db: Session,
    ledger: SessionLedger,
    gateway: StripeGateway,
    now: float | None = None,
    grace_seconds: int = ORPHAN_GRACE_SECONDS,
) -> dict[str, int]:
    """
    Walk the ledger of sessions created by checkout. Entries younger than
    the grace period may still belong to a running checkout and are skipped.
    Older entries backed by a payment are dropped; the rest are expired at
    the gateway and dropped.
    """
    now = now if now is not None else time.time()
    repo = OrderRepo(db)
    stats = {"skipped": 0, "settled": 0, "expired": 0, "failed": 0}

    for session_id, created_at in ledger.pending().items():
        if now - created_at < grace_seconds:
            stats["skipped"] += 1
            continue

        if repo.get_payment_by_reference(session_id):
            ledger.clear(session_id)
            stats["settled"] += 1
            continue

        try:
            gateway.expire_session(session_id)
        except UpstreamError as e:
            # stays in the ledger for the next run
            logger.warning(f"Could not expire orphaned session {session_id}: {e}")
            stats["failed"] += 1
            continue

        ledger.clear(session_id)
        stats["expired"] += 1
        logger.info(f"Expired orphaned checkout session {session_id}")

    return stats


@celery_app.task(name="minishop.tasks.reconcile.reconcile_sessions_task")
def reconcile_sessions_task():
    logger.info("Reconcile checkout sessions task started")
    db = SessionLocal()
    try:
        stats = reconcile_orphaned_sessions(db, SessionLedger(), StripeGateway())
        logger.info(f"Reconcile finished: {stats}")
        return stats
    finally:
        db.close()
