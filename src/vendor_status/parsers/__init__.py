"""
Format adapters and the shared extraction helpers.

Each adapter handles one document format and returns canonical components;
the aggregator turns those into a :class:`~vendor_status.models.NormalizedReport`.
"""

from .aggregator import aggregate, parse_failure_report
from .base import BaseAdapter, load_markup
from .fallback import CascadeResult, run_cascade, with_fallback
from .feed import FeedAdapter
from .heuristic import HeuristicTextAdapter
from .markup import StructuredMarkupAdapter
from .path import discover_collections, find_service_collection, resolve, resolve_collection
from .path_data import PathAddressedAdapter
from .vocabulary import Classification, classify, lookup_token

__all__ = [
    "BaseAdapter",
    "StructuredMarkupAdapter",
    "PathAddressedAdapter",
    "FeedAdapter",
    "HeuristicTextAdapter",
    "aggregate",
    "parse_failure_report",
    "load_markup",
    "CascadeResult",
    "run_cascade",
    "with_fallback",
    "resolve",
    "resolve_collection",
    "discover_collections",
    "find_service_collection",
    "Classification",
    "classify",
    "lookup_token",
]
