"""
Resource providers package.

Each resource provider owns the lifecycle handlers for one resource type.
"""

from plugins.resources.base import BaseResource

__all__ = ["BaseResource"]
