"""Login session management"""

import uuid
from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field


@dataclass
class UserSession:
    """Logged-in user session"""
    session_id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    cart_ids: list = field(default_factory=list)

    def touch(self) -> None:
        """Mark session as recently used"""
        self.updated_at = datetime.utcnow()

    def attach_cart(self, cart_id: str) -> None:
        if cart_id not in self.cart_ids:
            self.cart_ids.append(cart_id)
        self.touch()


class SessionManager:
    """Manages login sessions"""

    def __init__(self):
        self.sessions: dict[str, UserSession] = {}

    def create_session(self, user_id: str) -> UserSession:
        """Create a new session for a user"""
        now = datetime.utcnow()
        session = UserSession(
            session_id=str(uuid.uuid4()),
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )
        self.sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[UserSession]:
        """Get session by ID"""
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session"""
        if session_id in self.sessions:
            del self.sessions[session_id]
            return True
        return False

    def expire_sessions(self, max_age_hours: int = 24) -> list[UserSession]:
        """Remove and return sessions idle for more than max_age_hours"""
        now = datetime.utcnow()
        old_sessions = [
            session for session in self.sessions.values()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for session in old_sessions:
            del self.sessions[session.session_id]
        return old_sessions

    def reset(self) -> None:
        self.sessions.clear()


# Singleton instance
session_manager = SessionManager()
