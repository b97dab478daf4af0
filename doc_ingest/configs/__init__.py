"""
Configuration management module.

Typed settings for the ingestion pipeline, loaded from environment
variables and an optional .env file via Pydantic Settings.
"""

from doc_ingest.configs.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
