from fastapi import Request

from app.services.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    """Services built at app creation."""
    return request.app.state.container
