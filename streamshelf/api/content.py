"""
content.py - catalog content endpoints
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from streamshelf.api.dependencies import get_content_service
from streamshelf.drafts import ContentDraft
from streamshelf.models import ContentCreate, ContentItem, ContentUpdate
from streamshelf.services import ContentService

router = APIRouter()


@router.get("", response_model=list[ContentItem])
async def list_content(service: ContentService = Depends(get_content_service)):
    """Published content only."""
    return await service.list_published()


@router.post("/drafts", response_model=ContentItem, status_code=status.HTTP_201_CREATED)
async def submit_draft(
    draft: ContentDraft, service: ContentService = Depends(get_content_service)
):
    """Publish the upload form as it stands."""
    return await service.create_from_draft(draft)


@router.get("/{content_id}", response_model=ContentItem)
async def get_content(content_id: UUID, service: ContentService = Depends(get_content_service)):
    return await service.get(content_id)


@router.post("", response_model=ContentItem, status_code=status.HTTP_201_CREATED)
async def create_content(
    payload: ContentCreate, service: ContentService = Depends(get_content_service)
):
    return await service.create(payload)


@router.put("/{content_id}", response_model=ContentItem)
async def update_content(
    content_id: UUID,
    payload: ContentUpdate,
    service: ContentService = Depends(get_content_service),
):
    return await service.update(content_id, payload)


@router.delete("/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content(
    content_id: UUID, service: ContentService = Depends(get_content_service)
) -> Response:
    await service.delete(content_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
