"""
Resource Registry - Discovery and registration of resource providers.

This module provides the central registry for resource providers, handling
discovery, registration, and instantiation by resource type name.
"""

from importlib.metadata import entry_points
from typing import Dict, Optional, Type

from plugins.base import logger
from plugins.resources.base import BaseResource
from validation import validate_resource_schema

ENTRY_POINT_GROUP = "github_membership.resources"


class ResourceRegistry:
    """
    Central registry for resource providers.

    Providers are registered by class and keyed by the resource type name
    they handle. Instances are created lazily and reused; they hold no
    per-invocation state.
    """

    def __init__(self):
        # Registered provider classes (not instantiated)
        self._resources: Dict[str, Type[BaseResource]] = {}

        # Cached provider metadata (type name, version)
        self._resource_info: Dict[str, Dict[str, str]] = {}

        # Instantiated providers
        self._instances: Dict[str, BaseResource] = {}

    def register_resource(self, resource_class: Type[BaseResource]) -> None:
        """
        Register a resource provider class.

        Args:
            resource_class: The BaseResource subclass to register

        Raises:
            ValueError: If the provider's resource schema is invalid
        """
        # Create temporary instance to get type name/version (only once at registration)
        temp_instance = resource_class()
        type_name = temp_instance.type_name
        version = temp_instance.version

        is_valid, error_message = validate_resource_schema(temp_instance.schema)
        if not is_valid:
            raise ValueError(f"Resource provider {type_name}: {error_message}")

        if type_name in self._resources:
            logger.warning(f"Overwriting existing resource provider: {type_name}")

        self._resources[type_name] = resource_class
        self._resource_info[type_name] = {"type_name": type_name, "version": version}
        self._instances.pop(type_name, None)
        logger.info(f"Registered resource provider: {type_name} v{version}")

    def get_resource(self, type_name: str) -> BaseResource:
        """
        Get a resource provider instance.

        Args:
            type_name: The resource type name

        Returns:
            A BaseResource instance

        Raises:
            ValueError: If no provider is registered for the type name
        """
        if type_name not in self._resources:
            available = ", ".join(self._resources.keys()) or "none"
            raise ValueError(
                f"Unknown resource type: {type_name}. Available types: {available}"
            )

        if type_name not in self._instances:
            self._instances[type_name] = self._resources[type_name]()
            logger.info(f"Instantiated resource provider: {type_name}")

        return self._instances[type_name]

    def list_resources(self) -> list[str]:
        """List all registered resource type names."""
        return list(self._resources.keys())

    def has_resource(self, type_name: str) -> bool:
        """Check if a provider is registered for a resource type."""
        return type_name in self._resources

    def get_resource_info(self, type_name: str) -> Optional[Dict[str, str]]:
        """
        Get information about a registered resource provider.

        Args:
            type_name: The resource type name

        Returns:
            Dictionary with 'type_name' and 'version', or None if not found
        """
        return self._resource_info.get(type_name)


# Global registry instance
_registry: Optional[ResourceRegistry] = None


def get_registry() -> ResourceRegistry:
    """Get the global resource registry singleton."""
    global _registry
    if _registry is None:
        _registry = ResourceRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (mainly for testing)."""
    global _registry
    _registry = None


def register_builtin_resources() -> None:
    """
    Register the built-in resource providers and discover additional
    providers via entry points.
    """
    registry = get_registry()

    from plugins.resources.team_membership import TeamMembershipResource

    registry.register_resource(TeamMembershipResource)

    # Discover and register third-party providers via entry points
    discovered = entry_points(group=ENTRY_POINT_GROUP)
    for ep in discovered:
        try:
            resource_class = ep.load()
            registry.register_resource(resource_class)
        except Exception as e:
            logger.warning(f"Could not load resource provider {ep.name}: {e}")
