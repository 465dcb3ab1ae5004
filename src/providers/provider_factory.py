"""
Snapshot Provider Factory

Creates and caches the configured snapshot provider. Providers hold only
configuration, so one instance per type is shared by all queries; snapshots
themselves are never cached.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging

import constants as const
from providers.github_provider import GitHubProvider
from providers.local_provider import LocalProvider
from providers.snapshot_provider import SnapshotProvider


logger = logging.getLogger(__name__)


class ProviderFactory:
    """
    Factory for snapshot providers.

    Usage:
        provider = ProviderFactory.get_provider()          # from FINMAP_SNAPSHOT_PROVIDER
        provider = ProviderFactory.get_provider("local")
    """

    PROVIDER_NAMES = ("github", "local")

    # Singleton instances (one per provider type)
    _providers: dict[str, SnapshotProvider] = {}

    @classmethod
    def get_provider(cls, provider_name: str | None = None) -> SnapshotProvider:
        """
        Get a snapshot provider instance.

        Args:
            provider_name: 'github' or 'local'. If None, uses const.SNAPSHOT_PROVIDER

        Returns:
            SnapshotProvider instance

        Raises:
            ValueError: If the provider name is unknown
        """
        provider_name = (provider_name or const.SNAPSHOT_PROVIDER).lower()

        if provider_name in cls._providers:
            return cls._providers[provider_name]

        provider: SnapshotProvider
        if provider_name == "github":
            provider = GitHubProvider()
        elif provider_name == "local":
            provider = LocalProvider()
        else:
            raise ValueError(
                f"Unknown snapshot provider '{provider_name}'. Choose from: {', '.join(cls.PROVIDER_NAMES)}"
            )

        cls._providers[provider_name] = provider
        logger.info(f"Initialized {provider_name} snapshot provider")
        return provider

    @classmethod
    def reset(cls) -> None:
        """Reset factory state (mainly for testing)."""
        cls._providers.clear()
        logger.info("Snapshot provider factory reset")
