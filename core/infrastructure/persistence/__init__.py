"""Persistence adapters."""

from .deployment_record import DeploymentRecordStore

__all__ = ["DeploymentRecordStore"]
