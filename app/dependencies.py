"""Dependency injection for FastAPI application."""

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from config.settings import ExecutionProfile, Settings
from core.orchestrator import VideoAssemblyOrchestrator
from core.services.mock_client import MockGenerationClient
from core.services.veo_client import VeoGenerationClient

if TYPE_CHECKING:
    from core.protocols.generation_client import IGenerationClient

logger = logging.getLogger(__name__)

# Singleton orchestrator instance
_orchestrator_instance: VideoAssemblyOrchestrator | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings loaded from environment.
    """
    return Settings()


def _create_generation_client(settings: Settings) -> "IGenerationClient":
    """Create the appropriate generation client based on profile.

    Args:
        settings: Application settings.

    Returns:
        Configured generation client instance.
    """
    if settings.execution_profile == ExecutionProfile.DEBUG:
        logger.info("Using MockGenerationClient")
        return MockGenerationClient(settings)

    logger.info("Using VeoGenerationClient (model: %s)", settings.veo_model)
    return VeoGenerationClient(settings)


def create_orchestrator(settings: Settings | None = None) -> VideoAssemblyOrchestrator:
    """Create a new orchestrator with injected dependencies.

    Args:
        settings: Optional settings override.

    Returns:
        Configured VideoAssemblyOrchestrator instance.
    """
    settings = settings or get_settings()
    logger.info("Creating orchestrator with profile: %s", settings.execution_profile.value)

    return VideoAssemblyOrchestrator(
        settings=settings,
        client=_create_generation_client(settings),
    )


def get_orchestrator() -> VideoAssemblyOrchestrator:
    """Get the singleton orchestrator instance.

    Creates a new instance if one doesn't exist.

    Returns:
        The orchestrator instance.
    """
    global _orchestrator_instance
    if _orchestrator_instance is None:
        _orchestrator_instance = create_orchestrator()
    return _orchestrator_instance


def reset_orchestrator() -> None:
    """Reset the singleton orchestrator instance.

    Useful for testing or reconfiguration.
    """
    global _orchestrator_instance
    _orchestrator_instance = None
    logger.info("Orchestrator instance reset")
