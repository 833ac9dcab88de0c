"""The authenticated caller and the role rules every component consults.

Permission checks live here so cart, checkout, payment, order and ledger code
ask the same questions the same way.
"""

from dataclasses import dataclass
from enum import Enum

from ordering.exceptions import AuthorizationError


class Role(Enum):
    USER = "user"
    CHEF = "chef"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    email: str
    role: Role = Role.USER
    chef_id: str | None = None

    @classmethod
    def from_actor(cls, email, role=None, chef_id=None) -> "Principal":
        """Rebuild a principal from the actor fields carried on a command."""
        return cls(email=email, role=Role(role or Role.USER.value), chef_id=chef_id or None)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_chef(self) -> bool:
        return self.role == Role.CHEF

    def owns_kitchen(self, chef_id) -> bool:
        return self.is_chef and self.chef_id is not None and str(self.chef_id) == str(chef_id)

    def as_actor(self) -> dict:
        """Actor fields to splat into a command."""
        return {
            "actor_email": self.email,
            "actor_role": self.role.value,
            "actor_chef_id": self.chef_id,
        }


def require_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise AuthorizationError({"role": ["Administrator access required"]})


def require_chef_scope(principal: Principal, chef_id) -> None:
    """Chefs may read their own kitchen only; admins may read any."""
    if principal.is_admin or principal.owns_kitchen(chef_id):
        return
    raise AuthorizationError({"chef_id": ["Not allowed to view orders for this chef"]})


def require_order_reader(principal: Principal, order) -> None:
    """Owner, admin, or a chef with a line on the order may read it."""
    preparing = any(principal.owns_kitchen(item.chef_id) for item in order.items)
    if principal.is_admin or preparing or principal.email == order.owner_email:
        return
    raise AuthorizationError({"order_id": ["Not allowed to view this order"]})
