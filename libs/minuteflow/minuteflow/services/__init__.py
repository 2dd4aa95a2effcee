"""Backend-facing services."""

from minuteflow.services.staging_api import StagingAPI

__all__ = ["StagingAPI"]
