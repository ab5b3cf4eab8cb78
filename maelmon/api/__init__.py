from maelmon.api.cards import router as cards_router
from maelmon.api.health import router as health_router
from maelmon.api.user import router as user_router

__all__ = [
    "cards_router",
    "health_router",
    "user_router",
]
