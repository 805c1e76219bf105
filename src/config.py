"""
Configuration module for the GitHub Team Membership provider.

Loads configuration from environment variables. Credentials are never part
of the configuration; they arrive with every request.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class GitHubConfig:
    """GitHub REST API client configuration."""

    api_base_url: str = "https://api.github.com"
    api_version: str = "2022-11-28"
    request_timeout: int = 30  # seconds
    per_page: int = 100

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        per_page = int(os.getenv("GITHUB_PER_PAGE", "100"))
        if not 1 <= per_page <= 100:
            raise ValueError(
                "GITHUB_PER_PAGE must be between 1 and 100. "
                f"Got {per_page}."
            )

        return cls(
            api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip(
                "/"
            ),
            api_version=os.getenv("GITHUB_API_VERSION", "2022-11-28"),
            request_timeout=int(os.getenv("GITHUB_REQUEST_TIMEOUT", "30")),
            per_page=per_page,
        )


@dataclass
class ProviderConfig:
    """Provider runtime configuration."""

    log_level: str = "INFO"
    version: str = "1.0.0"

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            version=os.getenv("PROVIDER_VERSION", "1.0.0"),
        )


@dataclass
class Config:
    """Main configuration object."""

    github: GitHubConfig
    provider: ProviderConfig

    @classmethod
    def from_env(cls):
        """Load all configuration from environment variables."""
        return cls(
            github=GitHubConfig.from_env(),
            provider=ProviderConfig.from_env(),
        )

    @classmethod
    def default(cls):
        """Return default configuration."""
        return cls(
            github=GitHubConfig(),
            provider=ProviderConfig(),
        )


# Global config instance
config: Optional[Config] = None


def load_config() -> Config:
    """Load configuration (singleton pattern)."""
    global config
    if config is None:
        config = Config.from_env()
    return config


def get_config() -> Config:
    """Get the current configuration."""
    if config is None:
        return load_config()
    return config


def reset_config() -> None:
    """Reset configuration (mainly for testing)."""
    global config
    config = None
