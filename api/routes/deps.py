"""Route dependencies and helpers

Provides clean access to application state without Law of Demeter violations.
"""
from fastapi import Request

from app_state import AppState


def get_app_state(request: Request) -> AppState:
    """Get AppState from request

    Encapsulates the request.app.state.app_state chain.
    """
    return request.app.state.app_state
