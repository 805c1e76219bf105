"""
Resource Provider Base - Abstract interface for resource providers.

A resource provider owns the create, read, update, delete and list handlers
for one resource type. The host invokes it through entrypoint(), which
validates the desired state, dispatches to the handler for the verb and
guarantees a ProgressEvent comes back.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Union

from plugins.base import (
    Action,
    CallbackContext,
    HandlerErrorCode,
    ProgressEvent,
    ResourceHandlerRequest,
)
from validation import validate_spec_against_schema

logger = logging.getLogger(__name__)

Handler = Callable[[ResourceHandlerRequest, CallbackContext], Awaitable[ProgressEvent]]


class BaseResource(ABC):
    """
    Abstract base class for resource providers.

    Subclasses implement one coroutine per lifecycle verb. Handlers report
    lifecycle failures by returning ``ProgressEvent.failed(...)``; they do
    not raise.
    """

    @property
    @abstractmethod
    def type_name(self) -> str:
        """Resource type name (e.g., 'GitHub::Teams::Membership')."""
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        """Provider version string."""
        pass

    @property
    @abstractmethod
    def schema(self) -> Dict[str, Any]:
        """Resource schema used to validate desired state."""
        pass

    @abstractmethod
    async def create(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        """
        Create the resource described by the desired state.

        Args:
            request: The handler request carrying the desired state
            callback_context: Opaque context carried between invocations

        Returns:
            ProgressEvent with the created model, or a failure.
        """
        pass

    @abstractmethod
    async def read(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        """Return the current state of the resource."""
        pass

    @abstractmethod
    async def update(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        """Update the resource to match the desired state."""
        pass

    @abstractmethod
    async def delete(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        """Delete the resource. A successful event carries no model."""
        pass

    @abstractmethod
    async def list(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        """Enumerate resources of this type within the desired state's scope."""
        pass

    def required_properties(self, action: Action) -> Optional[Iterable[str]]:
        """
        Properties the desired state must carry for a verb.

        Returns None to use the schema's own ``required`` list. Override for
        verbs that only need part of the model.
        """
        return None

    def validate_request(
        self, action: Action, request: ResourceHandlerRequest
    ) -> tuple[bool, Optional[str]]:
        """Validate the desired state of a request for the given verb."""
        return validate_spec_against_schema(
            request.desired_resource_state,
            self.schema,
            required=self.required_properties(action),
        )

    def _handlers(self) -> Dict[Action, Handler]:
        return {
            Action.CREATE: self.create,
            Action.READ: self.read,
            Action.UPDATE: self.update,
            Action.DELETE: self.delete,
            Action.LIST: self.list,
        }

    async def entrypoint(
        self,
        action: Union[Action, str],
        request: ResourceHandlerRequest,
        callback_context: Optional[CallbackContext] = None,
    ) -> ProgressEvent:
        """
        Dispatch one invocation to the handler for ``action``.

        Never raises: invalid input becomes InvalidRequest and unexpected
        exceptions become InternalFailure.
        """
        try:
            action = Action(action.upper()) if isinstance(action, str) else action
        except ValueError:
            return ProgressEvent.failed(
                HandlerErrorCode.INVALID_REQUEST, f"Unsupported action: {action}"
            )

        is_valid, error_message = self.validate_request(action, request)
        if not is_valid:
            logger.warning(
                f"{self.type_name} {action.value} rejected: {error_message}"
            )
            return ProgressEvent.failed(HandlerErrorCode.INVALID_REQUEST, error_message)

        logger.info(
            f"{self.type_name} {action.value} started "
            f"(logical id: {request.logical_resource_identifier})"
        )

        try:
            event = await self._handlers()[action](request, callback_context or {})
        except Exception as e:
            logger.exception(f"{self.type_name} {action.value} failed unexpectedly")
            return ProgressEvent.failed(HandlerErrorCode.INTERNAL_FAILURE, str(e))

        if event.succeeded:
            logger.info(f"{self.type_name} {action.value} succeeded")
        else:
            logger.info(
                f"{self.type_name} {action.value} failed: "
                f"{event.error_code.value if event.error_code else 'unknown'}"
            )
        return event
