# Core modules

from .config import settings, get_settings
from .session import SessionManager, UserSession, session_manager

__all__ = ["settings", "get_settings", "SessionManager", "UserSession", "session_manager"]
