"""Record store contract and implementations."""

from app.repositories.store import AnalyticsStore

__all__ = ["AnalyticsStore"]
