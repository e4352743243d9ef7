"""
rangekit - Time range parsing, description and query interval computation
"""

__version__ = "1.0.0"
