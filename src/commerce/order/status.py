"""Order status: admin command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.order.order import FINAL_STEP, Order

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class UpdateOrderStatus:
    """Move an order to a fulfilment step. Going back to an earlier step is allowed."""

    order_id = Identifier(required=True)
    status_step = Integer(required=True, min_value=0, max_value=FINAL_STEP)


@commerce.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.set_status_step(command.status_step)
        repo.add(order)

        logger.info(
            "Order status updated",
            action="UPDATE_ORDER_STATUS",
            order_id=str(order.id),
            status=order.status,
            status_step=order.status_step,
        )
