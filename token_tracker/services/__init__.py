"""
Query services. All of them are read-only and stateless per request.
"""

from .token_service import TokenService
from .watermark import HeightWatermark, QueryContext

__all__ = ["TokenService", "HeightWatermark", "QueryContext"]
