"""Fingerprint ledger records."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class FingerprintRecord(BaseModel):
    """A previously processed (title, source) pair."""

    fingerprint: str = Field(..., alias="hash", description="md5 of normalized title|source")
    title: str = Field(..., description="Original title")
    source: str = Field(..., description="Original source name")
    processed_at: datetime = Field(..., alias="processedAt", description="First processing time")
    output_kind: str = Field("all", alias="outputType", description="Output kind(s) generated")

    model_config = {"populate_by_name": True}


class LedgerStore(BaseModel):
    """On-disk ledger document."""

    version: int = Field(..., description="Store format version")
    entries: List[FingerprintRecord] = Field(default_factory=list)


class LedgerStats(BaseModel):
    """Summary of the ledger contents."""

    total_processed: int = Field(0, description="Records currently held")
    last_processed_at: Optional[datetime] = Field(None, description="Most recent insert")
    counts_by_source: Dict[str, int] = Field(default_factory=dict)
