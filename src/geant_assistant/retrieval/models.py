"""
Retrieval Data Models

Canonical shapes for what the vector index returns and for the citation
entries derived from it.

Each ``SearchResult`` corresponds to ONE hit from the index: a similarity
score and the payload stored alongside the embedded chunk at ingestion time.
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


Authors = Union[str, List[str]]


def _author_name(item: Any) -> Optional[str]:
    if isinstance(item, dict):
        name = item.get("name")
        return str(name) if name else None
    return None if item is None else str(item)


class DocumentPayload(BaseModel):
    """
    Payload stored with every chunk in the ``geant_documents`` collection.

    Only the fields the assistant reads are declared; anything else the
    ingestion job wrote is ignored.
    """

    record_id: Optional[Union[int, str]] = Field(
        default=None,
        description="Stable identity of the source work (shared by all its chunks).",
    )

    title: Optional[str] = None

    content: str = Field(
        default="",
        description="Chunk text used as evidence.",
    )

    authors: Optional[Authors] = None

    url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("zenodo_url", "url"),
        description="Canonical landing page of the work.",
    )

    doi: Optional[str] = None
    file_name: Optional[str] = None

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
    )

    @field_validator("content", mode="before")
    @classmethod
    def _content_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("authors", mode="before")
    @classmethod
    def _authors_as_names(cls, value: Any) -> Any:
        """
        Accept a plain string, a list of names, or Zenodo-style creator
        objects (``[{"name": "Doe, J.", "affiliation": ...}]``).
        """
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, dict):
            value = [value]
        if isinstance(value, list):
            names = [_author_name(item) for item in value]
            return [name for name in names if name] or None
        return str(value)

    @property
    def display_title(self) -> Optional[str]:
        """Title, falling back to the file name when the work has none."""
        return self.title or self.file_name


class SearchResult(BaseModel):
    """A single scored hit from the vector index."""

    id: Optional[Union[int, str]] = None
    score: float
    payload: DocumentPayload = Field(default_factory=DocumentPayload)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("payload", mode="before")
    @classmethod
    def _payload_or_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class SourceRef(BaseModel):
    """A cited work as shown to the user under an answer."""

    title: Optional[str] = None
    authors: Optional[Authors] = None
    url: Optional[str] = None
    doi: Optional[str] = None

    model_config = ConfigDict(extra="forbid", frozen=True)
