from fastapi import APIRouter, Depends

from streamshelf.api.dependencies import get_content_service
from streamshelf.services import ContentService
from streamshelf.shelves import Shelf

router = APIRouter()


@router.get("", response_model=list[Shelf])
async def list_shelves(service: ContentService = Depends(get_content_service)):
    """Home page rows built from published content."""
    return await service.shelves()
