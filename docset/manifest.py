"""
Manifest models for the artifacts a docset build hands to the site generator.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .document import Document, normalize_path

MANIFEST_VERSION = "1.0"


class DocumentEntry(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    permalink: str = Field(..., min_length=1)
    redirect_from: List[str] = Field(default_factory=list)
    prev: Optional[str] = None
    next: Optional[str] = None
    source: str
    file: str = Field(..., description="Body file, relative to the output directory.")
    extra: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)
    word_count: int = Field(0, ge=0)

    @field_validator("permalink")
    @classmethod
    def clean_permalink(cls, value: str) -> str:
        cleaned = normalize_path(value)
        if not cleaned:
            raise ValueError("Permalink cannot be empty.")
        return cleaned

    @classmethod
    def from_document(cls, document: Document) -> "DocumentEntry":
        return cls(
            id=document.id,
            title=document.title,
            permalink=document.permalink,
            redirect_from=list(document.redirect_from),
            prev=document.prev,
            next=document.next,
            source=document.source,
            file=f"documents/{document.id}.md",
            extra=dict(document.extra),
            word_count=document.word_count,
        )


class DocumentManifest(BaseModel):
    version: str = MANIFEST_VERSION
    created_at: datetime = Field(default_factory=datetime.now)
    source_dir: str
    total_documents: int = Field(0, ge=0)
    documents: Dict[str, DocumentEntry] = Field(default_factory=dict)


class NavigationManifest(BaseModel):
    version: str = MANIFEST_VERSION
    created_at: datetime = Field(default_factory=datetime.now)
    chains: List[List[str]] = Field(default_factory=list)

    @field_validator("chains")
    @classmethod
    def check_chains(cls, value: List[List[str]]) -> List[List[str]]:
        seen = set()
        for chain in value:
            if not chain:
                raise ValueError("Navigation chains cannot be empty.")
            for doc_id in chain:
                if doc_id in seen:
                    raise ValueError(f"Document '{doc_id}' appears in more than one chain position.")
                seen.add(doc_id)
        return value


class RedirectManifest(BaseModel):
    version: str = MANIFEST_VERSION
    created_at: datetime = Field(default_factory=datetime.now)
    redirects: Dict[str, str] = Field(default_factory=dict)
