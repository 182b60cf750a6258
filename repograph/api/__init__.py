"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from repograph.api import app

    uvicorn repograph.api:app --reload
"""

from repograph.api.app import app

__all__ = ["app"]
