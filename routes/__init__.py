# Routes package __init__.py - re-exports routers for main.py convenience
from .cron import router as cron_router
from .learners import router as learners_router

__all__ = ['cron_router', 'learners_router']
