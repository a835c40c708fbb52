# minishop/api/deps.py
from minishop.services.payment_gateway import StripeGateway
from minishop.services.session_ledger import SessionLedger
from minishop.utils.settings import SESSION_RECONCILIATION_ENABLED

# one client and connection pool per process
session_ledger = SessionLedger() if SESSION_RECONCILIATION_ENABLED else None


def get_gateway() -> StripeGateway:
    return StripeGateway()


def get_session_ledger() -> SessionLedger | None:
    return session_ledger
