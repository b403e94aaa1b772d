from sqlalchemy import Column, String, Integer, BigInteger, Date, Numeric, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from models.base import Base


class Customer(Base):
    """
    A buyer, keyed by the source's customer id.

    Rows are insert-or-skip: the first row seen for an id wins and
    later rows with the same id never overwrite it.
    """
    __tablename__ = "customers"

    customer_id = Column(String(64), primary_key=True)
    customer_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False)
    region = Column(String(100), nullable=False, index=True)

    orders = relationship("Order", back_populates="customer", passive_deletes=True)


class Product(Base):
    """A catalog product, first-seen wins."""
    __tablename__ = "products"

    product_id = Column(String(64), primary_key=True)
    product_name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    unit_price = Column(Numeric(12, 2), nullable=False)

    order_items = relationship("OrderItem", back_populates="product", passive_deletes=True)


class Order(Base):
    """
    An order placed by a customer.

    shipping_cost and discount are order-level amounts; revenue queries
    add shipping once per joined order item.
    """
    __tablename__ = "orders"

    order_id = Column(String(64), primary_key=True)
    customer_id = Column(
        String(64),
        ForeignKey("customers.customer_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    order_date = Column(Date, nullable=False)
    payment_method = Column(String(50), nullable=False)
    shipping_cost = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False)

    customer = relationship("Customer", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", passive_deletes=True)

    __table_args__ = (
        Index("idx_orders_order_date", "order_date"),
    )


class OrderItem(Base):
    """One product line of an order, unique per (order_id, product_id)."""
    __tablename__ = "order_items"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    order_id = Column(
        String(64),
        ForeignKey("orders.order_id", ondelete="CASCADE"),
        nullable=False
    )
    product_id = Column(
        String(64),
        ForeignKey("products.product_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    quantity_sold = Column(Integer, nullable=False)
    unit_price_at_sale = Column(Numeric(12, 2), nullable=False)
    discount_applied = Column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")

    __table_args__ = (
        UniqueConstraint("order_id", "product_id", name="uq_order_items_order_product"),
    )
