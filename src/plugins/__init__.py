"""
Provider framework for declarative GitHub resources.

This package provides the request/result types, the resource provider base
class, and the registry used to look providers up by resource type.
"""

from plugins.base import (
    Action,
    HandlerErrorCode,
    OperationStatus,
    ProgressEvent,
    ResourceHandlerRequest,
)
from plugins.registry import ResourceRegistry, get_registry

__all__ = [
    "Action",
    "HandlerErrorCode",
    "OperationStatus",
    "ProgressEvent",
    "ResourceHandlerRequest",
    "ResourceRegistry",
    "get_registry",
]
