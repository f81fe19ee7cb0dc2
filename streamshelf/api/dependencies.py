from fastapi import Request

from streamshelf.services import ContentService, UpcomingService


def get_content_service(request: Request) -> ContentService:
    return request.app.state.content_service


def get_upcoming_service(request: Request) -> UpcomingService:
    return request.app.state.upcoming_service
