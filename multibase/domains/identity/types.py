"""Identity domain types."""

import uuid

from pydantic import BaseModel, ConfigDict, Field


def generate_user_id() -> str:
    """Return a new random identifier in canonical hyphenated UUID4 form."""
    return str(uuid.uuid4())


class UserIdentity(BaseModel):
    """The persistent pseudonymous identity stamped onto every payload."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)

    def to_payload(self) -> dict[str, str]:
        """Identity fields merged into outbound request bodies."""
        return {"id": self.id}
