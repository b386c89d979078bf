from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["user", "admin"]


class CurrentUser(BaseModel):
    """Identity of the authenticated caller as carried by the access token."""

    model_config = ConfigDict(frozen=True)

    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
