"""Some News Found - feed ingestion and article enrichment pipeline."""

__version__ = "0.1.0"
