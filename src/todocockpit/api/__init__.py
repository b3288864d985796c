"""HTTP API for ToDo Cockpit."""

from todocockpit.api.routes import router

__all__ = ["router"]
