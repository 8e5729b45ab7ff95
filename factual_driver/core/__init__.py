"""
Core module for factual_driver.

This module contains the request pipeline: query variants, URL routing, signing,
execution, response adapters and batching.
"""

from .batch import BatchQueue
from .exceptions import (
    ApiError,
    ConfigError,
    FactualException,
    InvalidRequestObject,
    TransportError,
    UnknownBatchEntry,
    UnsupportedQueryType,
)
from .executor import RequestExecutor
from .models import Circle, Point, RawResult
from .query import CrosswalkQuery, FacetQuery, FetchQuery, GeopulseQuery, ResolveQuery
from .responses import (
    BatchResponse,
    CrosswalkResponse,
    ReadResponse,
    ResolveResponse,
    SchemaResponse,
)
from .signer import OAuthSigner, SignedRequest
from .submissions import FlagRequest, SubmitRequest

__all__ = [
    "ApiError",
    "BatchQueue",
    "BatchResponse",
    "Circle",
    "ConfigError",
    "CrosswalkQuery",
    "CrosswalkResponse",
    "FacetQuery",
    "FactualException",
    "FetchQuery",
    "FlagRequest",
    "GeopulseQuery",
    "InvalidRequestObject",
    "OAuthSigner",
    "Point",
    "RawResult",
    "ReadResponse",
    "RequestExecutor",
    "ResolveQuery",
    "ResolveResponse",
    "SchemaResponse",
    "SignedRequest",
    "SubmitRequest",
    "TransportError",
    "UnknownBatchEntry",
    "UnsupportedQueryType",
]
