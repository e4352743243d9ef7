"""Utilities package for the time range service"""

from rangekit.utils.errors import ErrorCode, create_error_response
from rangekit.utils.logging import setup_logging

__all__ = ['ErrorCode', 'create_error_response', 'setup_logging']
