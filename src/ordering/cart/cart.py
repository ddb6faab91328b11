"""Shopping cart engine — the shopper's in-progress selection for one cart session.

A cart is owned by exactly one session (one browser tab). Every mutation is
written through to the configured ``CartStorage`` so the cart survives page
reloads; the write is best effort and never fails the mutation.

Quantities are kept within ``1 <= quantity <= product.inventory_count``:
additions and updates beyond the stock on hand are clamped, and products that
are sold out (or have no stock) are not added at all. A quantity update to
zero or below removes the line.
"""

from dataclasses import dataclass, field

import structlog

from ordering.cart.storage import CartStorage

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartProduct:
    """The product as the cart holds it: the catalogue record at add time."""

    id: str
    name: str
    price: int
    images: tuple[str, ...] = ()
    inventory_count: int = 0
    is_sold_out: bool = False
    slug: str = ""
    category: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CartProduct":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            price=int(data["price"]),
            images=tuple(data.get("images") or ()),
            inventory_count=int(data.get("inventory_count") or 0),
            is_sold_out=bool(data.get("is_sold_out", False)),
            slug=data.get("slug") or "",
            category=data.get("category"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "images": list(self.images),
            "inventory_count": self.inventory_count,
            "is_sold_out": self.is_sold_out,
            "slug": self.slug,
            "category": self.category,
        }

    @property
    def available(self) -> int:
        """Units the shopper may hold in the cart."""
        if self.is_sold_out:
            return 0
        return max(self.inventory_count, 0)

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""


@dataclass
class CartLine:
    product: CartProduct
    quantity: int

    @property
    def line_total(self) -> int:
        return self.product.price * self.quantity


@dataclass
class Cart:
    """The shopping cart of one session.

    Lines are kept in insertion order and are unique by product id.
    """

    session_id: str
    storage: CartStorage | None = None
    lines: list[CartLine] = field(default_factory=list)
    is_open: bool = False

    # -------------------------------------------------------------------
    # Loading and serialisation
    # -------------------------------------------------------------------
    @classmethod
    def load(cls, session_id: str, storage: CartStorage) -> "Cart":
        """Restore the session's cart, or start an empty one."""
        data = storage.load(session_id)
        cart = cls.from_dict(session_id, data) if data else cls(session_id=session_id)
        cart.storage = storage
        return cart

    @classmethod
    def from_dict(cls, session_id: str, data: dict) -> "Cart":
        """Rebuild a cart from its stored document.

        A document that is not an object yields an empty cart; malformed
        lines are dropped.
        """
        if not isinstance(data, dict):
            logger.warning("cart_document_malformed", session_id=session_id, kind=type(data).__name__)
            return cls(session_id=session_id)

        entries = data.get("items")
        lines = []
        for entry in entries if isinstance(entries, list) else []:
            try:
                product = CartProduct.from_dict(entry["product"])
                quantity = int(entry["quantity"])
            except (KeyError, TypeError, ValueError):
                logger.warning("cart_line_malformed", session_id=session_id)
                continue
            if quantity >= 1 and all(line.product.id != product.id for line in lines):
                lines.append(CartLine(product=product, quantity=quantity))
        return cls(session_id=session_id, lines=lines)

    def to_dict(self) -> dict:
        return {
            "items": [{"product": line.product.to_dict(), "quantity": line.quantity} for line in self.lines],
        }

    # -------------------------------------------------------------------
    # Lookups and derived totals
    # -------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.lines

    def line_for(self, product_id: str) -> CartLine | None:
        return next((line for line in self.lines if line.product.id == str(product_id)), None)

    def get_total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    def get_total_price(self) -> int:
        return sum(line.line_total for line in self.lines)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product: CartProduct, quantity: int = 1) -> int:
        """Add ``quantity`` units of ``product``, merging with an existing line.

        Returns the line's resulting quantity (0 when nothing could be added).
        """
        if quantity < 1 or product.available < 1:
            logger.debug("cart_add_ignored", session_id=self.session_id, product_id=product.id, quantity=quantity)
            return 0

        existing = self.line_for(product.id)
        if existing:
            # The newer product record wins; it carries the current stock level
            existing.product = product
            existing.quantity = min(existing.quantity + quantity, product.available)
            resulting = existing.quantity
        else:
            resulting = min(quantity, product.available)
            self.lines.append(CartLine(product=product, quantity=resulting))

        self._persist()
        self.open_cart()
        return resulting

    def remove_item(self, product_id: str) -> None:
        line = self.line_for(product_id)
        if line is None:
            return
        self.lines.remove(line)
        self._persist()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or below removes the line."""
        line = self.line_for(product_id)
        if line is None:
            return
        if quantity <= 0 or line.product.available < 1:
            self.remove_item(product_id)
            return
        line.quantity = min(quantity, line.product.available)
        self._persist()

    def clear_cart(self) -> None:
        self.lines = []
        self._persist()

    # -------------------------------------------------------------------
    # Cart panel visibility
    # -------------------------------------------------------------------
    def open_cart(self) -> None:
        self.is_open = True

    def close_cart(self) -> None:
        self.is_open = False

    def toggle_cart(self) -> None:
        self.is_open = not self.is_open

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def _persist(self) -> None:
        if self.storage is None:
            return
        try:
            self.storage.save(self.session_id, self.to_dict())
        except (OSError, TypeError, ValueError):
            logger.warning("cart_persist_failed", session_id=self.session_id, exc_info=True)
