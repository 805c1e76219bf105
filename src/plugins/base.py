"""
Core provider types and dataclasses.

This module contains the request and result types shared by every resource
provider: the lifecycle verbs, the operation status, the failure taxonomy,
and the ProgressEvent returned from each handler.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Opaque state carried between invocations by the host. Never inspected.
CallbackContext = Dict[str, Any]


class Action(Enum):
    """Lifecycle verbs a resource provider handles."""

    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LIST = "LIST"


class OperationStatus(Enum):
    """Standard status values for a handler outcome."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class HandlerErrorCode(Enum):
    """Failure kinds surfaced to the caller."""

    NOT_UPDATABLE = "NotUpdatable"
    INVALID_REQUEST = "InvalidRequest"
    ACCESS_DENIED = "AccessDenied"
    INVALID_CREDENTIALS = "InvalidCredentials"
    ALREADY_EXISTS = "AlreadyExists"
    NOT_FOUND = "NotFound"
    RESOURCE_CONFLICT = "ResourceConflict"
    THROTTLING = "Throttling"
    SERVICE_LIMIT_EXCEEDED = "ServiceLimitExceeded"
    NOT_STABILIZED = "NotStabilized"
    GENERAL_SERVICE_EXCEPTION = "GeneralServiceException"
    SERVICE_INTERNAL_ERROR = "ServiceInternalError"
    NETWORK_FAILURE = "NetworkFailure"
    INTERNAL_FAILURE = "InternalFailure"


@dataclass
class ResourceHandlerRequest:
    """Request passed by the host to a resource handler."""

    desired_resource_state: Dict[str, Any] = field(default_factory=dict)
    previous_resource_state: Optional[Dict[str, Any]] = None
    logical_resource_identifier: Optional[str] = None
    client_request_token: Optional[str] = None
    next_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResourceHandlerRequest":
        """Build a request from its camelCase wire form."""
        return cls(
            desired_resource_state=data.get("desiredResourceState") or {},
            previous_resource_state=data.get("previousResourceState"),
            logical_resource_identifier=data.get("logicalResourceIdentifier"),
            client_request_token=data.get("clientRequestToken"),
            next_token=data.get("nextToken"),
        )


@dataclass
class ProgressEvent:
    """Outcome of one handler invocation: success with model(s), or a failure."""

    status: OperationStatus = OperationStatus.PENDING
    error_code: Optional[HandlerErrorCode] = None
    message: str = ""
    resource_model: Optional[Any] = None
    resource_models: Optional[List[Any]] = None
    callback_context: Optional[CallbackContext] = None
    next_token: Optional[str] = None

    @classmethod
    def success(
        cls,
        model: Optional[Any] = None,
        models: Optional[List[Any]] = None,
    ) -> "ProgressEvent":
        return cls(
            status=OperationStatus.SUCCESS,
            resource_model=model,
            resource_models=models,
        )

    @classmethod
    def failed(cls, error_code: HandlerErrorCode, message: str) -> "ProgressEvent":
        return cls(
            status=OperationStatus.FAILED,
            error_code=error_code,
            message=message,
        )

    @property
    def succeeded(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the event to its camelCase wire form.

        Models are serialized through their own ``to_dict`` so write-only
        properties are left out. Empty fields are omitted.
        """
        data: Dict[str, Any] = {"status": self.status.value}
        if self.error_code is not None:
            data["errorCode"] = self.error_code.value
        if self.message:
            data["message"] = self.message
        if self.resource_model is not None:
            data["resourceModel"] = self.resource_model.to_dict()
        if self.resource_models is not None:
            data["resourceModels"] = [m.to_dict() for m in self.resource_models]
        if self.callback_context:
            data["callbackContext"] = self.callback_context
        if self.next_token:
            data["nextToken"] = self.next_token
        return data
