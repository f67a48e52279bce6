"""
Application services

Write side: order lifecycle, raw production records, the line hierarchy and
the product catalogue.
"""

from .base_service import ApplicationServiceBase
from .line_service import LineService
from .production_service import ProductionService

__all__ = ["ApplicationServiceBase", "LineService", "ProductionService"]
