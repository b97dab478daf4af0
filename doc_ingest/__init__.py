"""Document ingestion and vector retrieval pipeline."""

__version__ = "0.1.0"
