"""PDF ingestion: trustworthy full text and overlapping chunks for LLMs."""

__version__ = "0.1.0"
