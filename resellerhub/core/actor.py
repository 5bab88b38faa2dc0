from dataclasses import dataclass

from resellerhub.models.user import UserRole, SELLER_ROLES


@dataclass(frozen=True)
class Actor:
    """Authenticated caller identity handed to every ledger operation."""

    id: int
    role: str

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(id=user.id, role=user.role)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_seller(self) -> bool:
        return self.role in SELLER_ROLES
