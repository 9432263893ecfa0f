"""Typing content endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.api import deps
from app.schemas import ContentKind, ParagraphRead
from app.services.content import ContentService

router = APIRouter(prefix="/content", tags=["content"])


@router.get("/paragraphs/{kind}", response_model=ParagraphRead)
def read_paragraph(
    kind: ContentKind,
    service: ContentService = Depends(deps.get_content_service),
) -> dict:
    """Return a random preloaded paragraph from the requested bucket."""

    paragraph = service.random_paragraph(kind)
    if paragraph is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No content preloaded")
    return paragraph
