"""Rendered invoice document tree shared by preview and PDF export."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class DocumentNode(BaseModel):
    kind: str
    text: Optional[str] = None
    style: Dict[str, str] = Field(default_factory=dict)
    children: List[DocumentNode] = Field(default_factory=list)


class RenderedDocument(BaseModel):
    family: str
    template_name: str
    width_mm: int = 210
    filename: str
    root: DocumentNode
