"""
Identity Domain Entities
========================
"""

from dataclasses import dataclass, field
from typing import Any

from cmdb.identity.domain.passwords import verify_password


@dataclass
class User:
    """An operator account. The hash is excluded from repr."""

    id: str
    username: str
    password_hash: str = field(repr=False)

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    @classmethod
    def from_model(cls, model: Any) -> "User":
        return cls(id=str(model.id), username=model.username, password_hash=model.password_hash)
