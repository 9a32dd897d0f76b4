"""
HTTP transport for slotrun (FastAPI).

Usage::

    uvicorn slotrun.api:create_app --factory
"""

from slotrun.api.app import create_app

__all__ = ["create_app"]
