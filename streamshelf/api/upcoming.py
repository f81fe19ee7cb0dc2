"""
upcoming.py - upcoming content endpoints

POST inserts at the requested sectionOrder and shifts whatever already
occupies that slot (and every later slot) down by one.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from streamshelf.api.dependencies import get_upcoming_service
from streamshelf.models import UpcomingCreate, UpcomingEntry, UpcomingUpdate
from streamshelf.services import UpcomingService

router = APIRouter()


@router.get("", response_model=list[UpcomingEntry])
async def list_upcoming(service: UpcomingService = Depends(get_upcoming_service)):
    return await service.list_all()


@router.get("/display", response_model=list[UpcomingEntry])
async def display_upcoming(
    today: date | None = None, service: UpcomingService = Depends(get_upcoming_service)
):
    """Coming Soon page: not yet released, by section order, at most 20."""
    return await service.display(today=today)


@router.get("/{entry_id}", response_model=UpcomingEntry)
async def get_upcoming(entry_id: UUID, service: UpcomingService = Depends(get_upcoming_service)):
    return await service.get(entry_id)


@router.post("", response_model=UpcomingEntry, status_code=status.HTTP_201_CREATED)
async def create_upcoming(
    payload: UpcomingCreate, service: UpcomingService = Depends(get_upcoming_service)
):
    return await service.insert(payload)


@router.put("/{entry_id}", response_model=UpcomingEntry)
async def update_upcoming(
    entry_id: UUID,
    payload: UpcomingUpdate,
    service: UpcomingService = Depends(get_upcoming_service),
):
    return await service.update(entry_id, payload)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_upcoming(
    entry_id: UUID, service: UpcomingService = Depends(get_upcoming_service)
) -> Response:
    await service.delete(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
