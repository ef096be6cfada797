"""
Utilities Package

Shared helper functions used across the API blueprints.
"""

from app.utils.helpers import (
    get_json_body,
    error_response,
    parse_bool,
    parse_month_args,
)

__all__ = [
    'get_json_body',
    'error_response',
    'parse_bool',
    'parse_month_args',
]
