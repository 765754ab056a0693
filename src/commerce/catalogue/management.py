"""Catalogue administration: add products and set their stock."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from commerce.catalogue.product import Product
from commerce.domain import commerce


@commerce.command(part_of="Product")
class AddProduct:
    product_id = Identifier()
    title = String(required=True, max_length=255)
    author = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    cover = String(max_length=1000)
    stock_quantity = Integer(default=0, min_value=0)


@commerce.command(part_of="Product")
class RestockProduct:
    """Set the absolute stock count of a product (admin edit)."""

    product_id = Identifier(required=True)
    stock_quantity = Integer(required=True, min_value=0)


@commerce.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            product_id=command.product_id,
            title=command.title,
            author=command.author,
            price=command.price,
            cover=command.cover,
            stock_quantity=command.stock_quantity,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_stock(command.stock_quantity)
        repo.add(product)
