"""Order transaction: reserve every line, then store the order, or change nothing.

Stock is taken line by line through ``InventoryReservation``. The first line
that cannot be reserved stops the attempt, and everything reserved so far is
given back, newest first, before ``create`` returns. The order is only stored
once every line holds its stock. If storing fails, or a reservation raises
instead of returning, the reservations are given back too.
"""

import dataclasses

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from commerce.errors import OutOfStock, StoreFailure
from commerce.inventory.reservation import InventoryReservation, Reservation
from commerce.order.draft import OrderDraft
from commerce.order.order import Order

logger = structlog.get_logger(__name__)


class OrderTransaction:
    def __init__(self, reservation: InventoryReservation | None = None, repository=None) -> None:
        self.reservation = reservation if reservation is not None else InventoryReservation()
        self._repository = repository

    @property
    def repository(self):
        return self._repository if self._repository is not None else current_domain.repository_for(Order)

    def create(self, draft: OrderDraft, line_items) -> Order | OutOfStock | StoreFailure:
        if not line_items:
            raise ValidationError({"items": ["An order needs at least one item"]})

        # Built up front so malformed input fails before any stock moves
        order = Order.place(
            user_id=draft.user_id,
            customer=draft.customer.to_customer(),
            payment=draft.payment_summary(),
            line_items=line_items,
        )

        reserved: list[Reservation] = []
        for line in line_items:
            try:
                result = self.reservation.reserve(line.product_id, line.quantity)
            except ValidationError:
                self._release(reserved)
                raise
            except Exception as exc:
                self._release(reserved)
                logger.exception(
                    "Stock reservation raised", action="ORDER_FAILED", user_id=draft.user_id, product_id=line.product_id
                )
                return StoreFailure(reason=str(exc))

            if isinstance(result, Reservation):
                reserved.append(result)
                continue

            self._release(reserved)
            if isinstance(result, OutOfStock):
                result = dataclasses.replace(result, title=line.title)
            logger.warning(
                "Order failed",
                action="ORDER_FAILED",
                user_id=draft.user_id,
                code=result.code,
                product_id=line.product_id,
            )
            return result

        try:
            self.repository.add(order)
        except Exception as exc:
            self._release(reserved)
            logger.exception("Order could not be stored", action="ORDER_FAILED", user_id=draft.user_id)
            return StoreFailure(reason=str(exc))

        logger.info(
            "Order created",
            action="ORDER_CREATED",
            order_id=str(order.id),
            user_id=draft.user_id,
            total=draft.total,
            item_count=len(line_items),
        )
        return order

    def _release(self, reserved: list[Reservation]) -> None:
        for reservation in reversed(reserved):
            self.reservation.release(reservation)
