"""Artifact domain models."""

from typing import Annotated

from pydantic import BaseModel, Field

from semnav.domain.address import Address

UnitFloat = Annotated[float, Field(ge=0.0, le=1.0)]


class ArtifactDocument(BaseModel):
    """Raw document handed over by an ingestion collaborator.

    Attributes:
        source_ref: Reference to the source of the document (file path, URL, ...)
        title: Human readable title, used to generate slugs
        content: Opaque text, scanned for bracketed references and token overlap
        type: Lowercase type tag of the artifact
        created_at: Creation timestamp (seconds since epoch)
        modified_at: Modification timestamp (seconds since epoch)
        difficulty: Optional difficulty hint used as the base cost of reaching this artifact
        time_required: Optional time hint in hours for reaching this artifact
    """

    source_ref: str
    title: str
    content: str = ""
    type: str = "note"
    created_at: float = 0.0
    modified_at: float = 0.0
    difficulty: UnitFloat | None = None
    time_required: Annotated[float, Field(ge=0.0)] | None = None


class ArtifactRecord(ArtifactDocument):
    """Document bound to the address it was registered under."""

    address: Address
