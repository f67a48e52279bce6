"""
Query services

Read side of the application: each service loads records for a report window
through the repositories and reduces them for the API.
"""

from .base_query import BaseQueryService, ComparisonPeriod, ProductionSort
from .efficiency_queries import EfficiencyQueryService
from .production_queries import ProductionQueryService
from .stoppage_queries import StoppageQueryService

__all__ = [
    "BaseQueryService",
    "ComparisonPeriod",
    "EfficiencyQueryService",
    "ProductionQueryService",
    "ProductionSort",
    "StoppageQueryService",
]
