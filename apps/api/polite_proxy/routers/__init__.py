from .messages import method_not_allowed_handler, router as messages_router

ROUTERS = (messages_router,)

__all__ = ["ROUTERS", "messages_router", "method_not_allowed_handler"]
