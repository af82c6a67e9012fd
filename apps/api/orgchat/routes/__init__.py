"""Route modules."""

from .account import router as account_router
from .conversations import router as conversations_router
from .maintenance import router as maintenance_router
from .organization import router as organization_router
from .session import router as session_router

__all__ = [
    "account_router",
    "conversations_router",
    "maintenance_router",
    "organization_router",
    "session_router",
]
