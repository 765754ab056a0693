"""Commerce bounded context: stock, coupons, orders and the buyer-side cart.

Remote-store documents (products, coupons, orders, user accounts) are CQRS
aggregates. The cart and wishlist live on the buyer's device and talk to the
remote store through small ports, and checkout ties the two sides together.
"""

import structlog
from protean.domain import Domain

commerce = Domain(name="commerce")

logger = structlog.get_logger(__name__)
