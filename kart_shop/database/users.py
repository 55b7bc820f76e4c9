"""Mock user registry"""

import uuid
from typing import Iterable, Optional

from ..core.config import settings
from ..models.user import User


class UserDatabase:
    """
    In-memory users keyed by email.

    Passwords are never stored; the mock login only checks their length.
    Emails listed in ``admin_emails`` register as administrators.
    """

    def __init__(self, admin_emails: Iterable[str] = ()):
        self.admin_emails = {email.strip().lower() for email in admin_emails}
        self.users: dict[str, User] = {}

    def register(
        self,
        name: str,
        email: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Optional[User]:
        """Register a user; None if the email is already taken"""
        key = email.strip().lower()
        if key in self.users:
            return None

        user = User(
            user_id=f"user_{uuid.uuid4().hex[:12]}",
            name=name,
            email=key,
            phone=phone,
            address=address,
            is_admin=key in self.admin_emails,
        )
        self.users[key] = user
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.users.get(email.strip().lower())

    def get_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.user_id == user_id), None)

    def get_or_register(self, email: str) -> User:
        """Existing user for the email, or a new one named after it"""
        user = self.get_by_email(email)
        if user:
            return user
        return self.register(name=email.split("@")[0], email=email)

    def reset(self) -> None:
        self.users.clear()


# Singleton instance
user_db = UserDatabase(settings.admin_emails)
