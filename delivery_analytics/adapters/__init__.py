"""
Data access for analytics.

Repositories fetch records on behalf of the host; ``load_snapshot`` bundles
them into the read-only snapshot the engine consumes.
"""

from delivery_analytics.adapters.base import BaseAnalyticsRepository, load_snapshot
from delivery_analytics.adapters.memory import InMemoryRepository

__all__ = [
    'BaseAnalyticsRepository',
    'InMemoryRepository',
    'load_snapshot',
]
