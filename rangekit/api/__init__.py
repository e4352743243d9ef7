"""API package for the rangekit time range service"""

from . import health, ranges

__all__ = ["health", "ranges"]
