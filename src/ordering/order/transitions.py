"""Order status transitions: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.access.principal import Principal
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class TransitionOrder:
    order_id = Identifier(required=True)
    target_status = String(required=True, max_length=20)
    expected_status = String(max_length=20)
    actor_email = String(required=True, max_length=255)
    actor_role = String(required=True, max_length=20)
    actor_chef_id = String(max_length=100)


@ordering.command_handler(part_of=Order)
class TransitionOrderHandler:
    @handle(TransitionOrder)
    def transition_order(self, command):
        actor = Principal.from_actor(command.actor_email, command.actor_role, command.actor_chef_id)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.order_status
        order.transition(command.target_status, actor, expected_status=command.expected_status)
        repo.add(order)

        logger.info(
            "order_transitioned",
            order_id=str(order.id),
            from_status=previous,
            to_status=order.order_status,
            actor_email=actor.email,
            actor_role=actor.role.value,
        )
        return order
