"""Metadata reading and merging for photognome."""

from photognome.metadata.base import MetadataProvider
from photognome.metadata.merger import merge_metadata, resolve_metadata
from photognome.metadata.provider import FileMetadataProvider

__all__ = [
    "FileMetadataProvider",
    "MetadataProvider",
    "merge_metadata",
    "resolve_metadata",
]
