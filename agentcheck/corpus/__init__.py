"""
Documentation corpus: loading and ignore-region filtering.
"""

from agentcheck.corpus.filter import (
    DEFAULT_MARKERS,
    IgnoreMarkers,
    IgnoreRegion,
    filter_ignore_regions,
    scan_ignore_regions,
)
from agentcheck.corpus.loader import load_filtered
from agentcheck.corpus.models import DocumentCorpus, DocumentFile

__all__ = [
    "DEFAULT_MARKERS",
    "IgnoreMarkers",
    "IgnoreRegion",
    "filter_ignore_regions",
    "scan_ignore_regions",
    "load_filtered",
    "DocumentCorpus",
    "DocumentFile",
]
