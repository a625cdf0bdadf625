"""Retrieval and extractive summarization over ClinicalTrials.gov study records."""

__version__ = "1.0.0"
