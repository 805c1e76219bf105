"""
GitHub Team Membership resource provider.

Reconciles a user's membership of a GitHub organization team. GitHub has a
single idempotent PUT for adding and updating a membership, so create and
update differ only in the existence check that precedes it.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from config import get_config
from plugins.base import (
    Action,
    CallbackContext,
    HandlerErrorCode,
    ProgressEvent,
    ResourceHandlerRequest,
)
from plugins.github.client import GitHubClient, GitHubRequestError
from plugins.github.errors import handle_error
from plugins.resources.base import BaseResource
from plugins.resources.team_membership.models import (
    IDENTIFIER_PROPERTIES,
    RESOURCE_SCHEMA,
    TYPE_NAME,
    MembershipState,
    ResourceModel,
)

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Optional[str], str], GitHubClient]


class TeamMembershipResource(BaseResource):
    """
    Resource provider for GitHub::Teams::Membership.

    Holds no state between invocations: every remote interaction builds a
    fresh client from the token in the desired state.
    """

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        self._client_factory = client_factory or GitHubClient

    @property
    def type_name(self) -> str:
        return TYPE_NAME

    @property
    def version(self) -> str:
        return get_config().provider.version

    @property
    def schema(self) -> Dict[str, Any]:
        return RESOURCE_SCHEMA

    @property
    def user_agent(self) -> str:
        return (
            "AWS CloudFormation (+https://aws.amazon.com/cloudformation/) "
            f"CloudFormation resource {self.type_name}/{self.version}"
        )

    def required_properties(self, action: Action) -> Optional[Iterable[str]]:
        if action in (Action.READ, Action.DELETE):
            return [*IDENTIFIER_PROPERTIES, "GitHubAccess"]
        if action == Action.LIST:
            return ["Org", "TeamSlug", "GitHubAccess"]
        return None

    # Lifecycle handlers

    async def create(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        model = ResourceModel.from_dict(request.desired_resource_state)

        if await self._assert_membership_exist(model) is not None:
            return ProgressEvent.failed(
                HandlerErrorCode.ALREADY_EXISTS,
                self._already_exists_message(request, model),
            )

        try:
            data = await self._add_or_update_membership(model)
        except GitHubRequestError as e:
            return handle_error(e, self.type_name)

        return ProgressEvent.success(self._set_model_from_api_response(model, data))

    async def read(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        model = ResourceModel.from_dict(request.desired_resource_state)

        try:
            data = await self._get_membership(model)
        except GitHubRequestError as e:
            return handle_error(e, self.type_name)

        return ProgressEvent.success(self._set_model_from_api_response(model, data))

    async def update(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        model = ResourceModel.from_dict(request.desired_resource_state)

        changed = self._changed_identifiers(request)
        if changed:
            return ProgressEvent.failed(
                HandlerErrorCode.NOT_UPDATABLE,
                f"Resource of type '{self.type_name}' cannot change "
                f"create-only properties: {', '.join(changed)}",
            )

        if await self._assert_membership_exist(model) is None:
            return ProgressEvent.failed(
                HandlerErrorCode.NOT_FOUND, self._not_found_message(request, model)
            )

        try:
            data = await self._add_or_update_membership(model)
        except GitHubRequestError as e:
            return handle_error(e, self.type_name)

        return ProgressEvent.success(self._set_model_from_api_response(model, data))

    async def delete(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        model = ResourceModel.from_dict(request.desired_resource_state)

        if await self._assert_membership_exist(model) is None:
            return ProgressEvent.failed(
                HandlerErrorCode.NOT_FOUND, self._not_found_message(request, model)
            )

        try:
            async with self._client(model) as client:
                await client.remove_membership(
                    model.org, model.team_slug, model.username
                )
        except GitHubRequestError as e:
            return handle_error(e, self.type_name)

        logger.info(f"Removed {model.username} from {model.org}/{model.team_slug}")
        return ProgressEvent.success()

    async def list(
        self, request: ResourceHandlerRequest, callback_context: CallbackContext
    ) -> ProgressEvent:
        model = ResourceModel.from_dict(request.desired_resource_state)

        try:
            async with self._client(model) as client:
                current_members = [
                    self._list_item(model, item, MembershipState.ACTIVE)
                    async for item in client.list_members(model.org, model.team_slug)
                ]
            async with self._client(model) as client:
                pending_invites = [
                    self._list_item(model, item, MembershipState.PENDING)
                    async for item in client.list_pending_invitations(
                        model.org, model.team_slug
                    )
                ]
        except GitHubRequestError as e:
            return handle_error(e, self.type_name)

        logger.info(
            f"Listed {model.org}/{model.team_slug}: "
            f"{len(current_members)} active, {len(pending_invites)} pending"
        )
        return ProgressEvent.success(models=current_members + pending_invites)

    # Remote calls

    def _client(self, model: ResourceModel) -> GitHubClient:
        return self._client_factory(model.github_access, self.user_agent)

    async def _assert_membership_exist(
        self, model: ResourceModel
    ) -> Optional[Dict[str, Any]]:
        """
        Probe whether the membership exists.

        Any failure of the read, whatever its cause, means existence could
        not be confirmed and yields None.
        """
        try:
            return await self._get_membership(model)
        except GitHubRequestError as e:
            logger.warning(
                f"Membership {model.identifier()} not confirmed "
                f"(status={e.status}): {e.message}"
            )
            return None

    async def _get_membership(self, model: ResourceModel) -> Dict[str, Any]:
        async with self._client(model) as client:
            return await client.get_membership(
                model.org, model.team_slug, model.username
            )

    async def _add_or_update_membership(self, model: ResourceModel) -> Dict[str, Any]:
        async with self._client(model) as client:
            return await client.add_or_update_membership(
                model.org, model.team_slug, model.username, model.role
            )

    # Helpers

    @staticmethod
    def _set_model_from_api_response(
        model: ResourceModel, data: Dict[str, Any]
    ) -> ResourceModel:
        model.role = data.get("role")
        model.state = data.get("state")
        return model

    @staticmethod
    def _list_item(
        model: ResourceModel, item: Dict[str, Any], state: MembershipState
    ) -> ResourceModel:
        # Neither list endpoint returns a state; the endpoint itself is the state
        return ResourceModel(
            org=model.org,
            team_slug=model.team_slug,
            username=item.get("login"),
            state=state.value,
        )

    @staticmethod
    def _changed_identifiers(request: ResourceHandlerRequest) -> List[str]:
        previous = request.previous_resource_state
        if not previous:
            return []
        desired = request.desired_resource_state
        return [
            prop
            for prop in IDENTIFIER_PROPERTIES
            if prop in previous and previous.get(prop) != desired.get(prop)
        ]

    def _already_exists_message(
        self, request: ResourceHandlerRequest, model: ResourceModel
    ) -> str:
        identifier = request.logical_resource_identifier or model.identifier()
        return (
            f"Resource of type '{self.type_name}' with identifier "
            f"'{identifier}' already exists."
        )

    def _not_found_message(
        self, request: ResourceHandlerRequest, model: ResourceModel
    ) -> str:
        identifier = request.logical_resource_identifier or model.identifier()
        return (
            f"Resource of type '{self.type_name}' with identifier "
            f"'{identifier}' was not found."
        )
