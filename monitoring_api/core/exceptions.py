"""Domain exceptions for the Monitoring Lab API"""


class ProductNotFoundError(LookupError):
    """Raised for, or reported about, an identifier absent from the store."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")
