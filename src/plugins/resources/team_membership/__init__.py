"""
GitHub::Teams::Membership resource provider.
"""

from plugins.resources.team_membership.handlers import TeamMembershipResource
from plugins.resources.team_membership.models import (
    TYPE_NAME,
    MembershipRole,
    MembershipState,
    ResourceModel,
)

__all__ = [
    "TYPE_NAME",
    "MembershipRole",
    "MembershipState",
    "ResourceModel",
    "TeamMembershipResource",
]
