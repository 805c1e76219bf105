"""
Resource model for GitHub::Teams::Membership.

The model maps between the declarative PascalCase properties and the Python
attributes used by the handlers.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional

TYPE_NAME = "GitHub::Teams::Membership"


class MembershipRole(Enum):
    """Permission level of a team membership."""

    MEMBER = "member"
    MAINTAINER = "maintainer"


class MembershipState(Enum):
    """Whether the membership invitation has been accepted."""

    ACTIVE = "active"
    PENDING = "pending"


# A single URL path segment: no slash, not "." or ".."
PATH_SEGMENT_PATTERN = r"^(?!\.+$)[^/]+$"

RESOURCE_SCHEMA: Dict[str, Any] = {
    "typeName": TYPE_NAME,
    "description": "Manages a user's membership of a team in a GitHub organization",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "Org": {"type": "string", "pattern": PATH_SEGMENT_PATTERN},
        "TeamSlug": {"type": "string", "pattern": PATH_SEGMENT_PATTERN},
        "Username": {"type": "string", "pattern": PATH_SEGMENT_PATTERN},
        "Role": {
            "type": "string",
            "enum": [r.value for r in MembershipRole],
            "default": MembershipRole.MEMBER.value,
        },
        "State": {
            "type": "string",
            "enum": [s.value for s in MembershipState],
        },
        "GitHubAccess": {"type": "string", "minLength": 1},
    },
    "required": ["Org", "TeamSlug", "Username", "GitHubAccess"],
    "readOnlyProperties": ["/properties/State"],
    "writeOnlyProperties": ["/properties/GitHubAccess"],
    "createOnlyProperties": [
        "/properties/Org",
        "/properties/TeamSlug",
        "/properties/Username",
    ],
    "primaryIdentifier": [
        "/properties/Org",
        "/properties/TeamSlug",
        "/properties/Username",
    ],
}

IDENTIFIER_PROPERTIES = ("Org", "TeamSlug", "Username")
WRITE_ONLY_PROPERTIES = ("GitHubAccess",)


@dataclass
class ResourceModel:
    """A user's membership in one team of one organization."""

    org: Optional[str] = None
    team_slug: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
    state: Optional[str] = None
    github_access: Optional[str] = field(default=None, repr=False)  # Never log token

    TYPE_NAME = TYPE_NAME

    # attribute name -> property name
    _PROPERTIES = {
        "org": "Org",
        "team_slug": "TeamSlug",
        "username": "Username",
        "role": "Role",
        "state": "State",
        "github_access": "GitHubAccess",
    }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ResourceModel":
        data = data or {}
        return cls(**{attr: data.get(prop) for attr, prop in cls._PROPERTIES.items()})

    def to_dict(self, include_write_only: bool = False) -> Dict[str, Any]:
        """Serialize set properties; write-only properties are omitted by default."""
        result = {}
        for f in fields(self):
            prop = self._PROPERTIES[f.name]
            value = getattr(self, f.name)
            if value is None:
                continue
            if prop in WRITE_ONLY_PROPERTIES and not include_write_only:
                continue
            result[prop] = value
        return result

    def identifier(self) -> str:
        """Primary identifier in ``org|team|username`` form."""
        return "|".join(str(v) for v in (self.org, self.team_slug, self.username))

