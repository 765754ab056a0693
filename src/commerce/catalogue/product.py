"""Product aggregate: the remote catalogue document that also carries stock.

The stock count lives on the product document itself. Every save moves the
aggregate version, which is the guard the conditional write in
``commerce.inventory`` compares against.
"""

from dataclasses import dataclass

from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String

from commerce.domain import commerce


@dataclass(frozen=True)
class ProductSnapshot:
    """Display fields of a product, as copied into carts and wishlists."""

    product_id: str
    title: str
    price: float
    cover: str | None = None
    author: str | None = None

    @classmethod
    def from_dict(cls, row: dict) -> "ProductSnapshot":
        return cls(
            product_id=str(row["product_id"]),
            title=row["title"],
            price=float(row["price"]),
            cover=row.get("cover"),
            author=row.get("author"),
        )


@commerce.aggregate
class Product:
    title = String(required=True, max_length=255)
    author = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    cover = String(max_length=1000)
    stock_quantity = Integer(default=0, min_value=0)

    @classmethod
    def create(cls, title, price, author=None, cover=None, stock_quantity=0, product_id=None):
        kwargs = {}
        if product_id:
            kwargs["id"] = product_id
        return cls(
            title=title,
            price=price,
            author=author,
            cover=cover,
            stock_quantity=stock_quantity,
            **kwargs,
        )

    def set_stock(self, quantity):
        if quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock cannot go below zero"]})
        self.stock_quantity = quantity

    def snapshot(self) -> ProductSnapshot:
        return ProductSnapshot(
            product_id=str(self.id),
            title=self.title,
            price=self.price,
            cover=self.cover,
            author=self.author,
        )
