"""FastAPI routers acting as controllers in the MVC architecture."""

from . import catalog, ritual

__all__ = ["catalog", "ritual"]
