from fastapi import Header, Request
from app.services.notifier import Notifier

def get_notifier(request: Request) -> Notifier:
    """The notifier the app factory stored on app.state"""
    return request.app.state.notifier

def get_current_user_id(x_user_id: int = Header(..., description="Caller id, set by the auth gateway")) -> int:
    return x_user_id
