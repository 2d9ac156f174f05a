"""Panel operator identity taken from the Azure AD access token."""

from __future__ import annotations

from pydantic import BaseModel


class UserInfo(BaseModel):
    id: str | None = None
    name: str | None = None
    email: str | None = None
    roles: list[str] = []

    def has_role(self, role: str) -> bool:
        return role in self.roles
