"""Domain models for the photognome application."""

from photognome.models.core import (
    CandidateStatus,
    MetadataRecord,
    MetadataSource,
    SidecarSet,
    SourceMetadata,
)
from photognome.models.ledger import LedgerEntry, LedgerOperation
from photognome.models.plan import (
    DEFAULT_MAX_FILENAME_LEN,
    DEFAULT_TEMPLATE,
    PlanCandidate,
    PlanRequest,
    PlanStats,
    RenamePlan,
)

__all__ = [
    "CandidateStatus",
    "DEFAULT_MAX_FILENAME_LEN",
    "DEFAULT_TEMPLATE",
    "LedgerEntry",
    "LedgerOperation",
    "MetadataRecord",
    "MetadataSource",
    "PlanCandidate",
    "PlanRequest",
    "PlanStats",
    "RenamePlan",
    "SidecarSet",
    "SourceMetadata",
]
