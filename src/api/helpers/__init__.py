"""API helper utilities for routers."""
from api.helpers.query_params import parse_include_deleted, parse_optional_uuid, parse_take

__all__ = [
    "parse_include_deleted",
    "parse_optional_uuid",
    "parse_take",
]
