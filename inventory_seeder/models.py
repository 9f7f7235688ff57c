# inventory_seeder/models.py
import enum
import uuid

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, Text, Enum, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

def new_uuid() -> str:
    """Primary keys are UUID strings, matching the application's schema."""
    return str(uuid.uuid4())

def _enum_values(enum_class):
    return [member.value for member in enum_class]

class ChangeType(enum.Enum):
    """Kind of event recorded in the product stock ledger.

    Values:
        ORDER ('order'): Stock leaving with a customer order
        RESTOCK ('restock'): Stock received from a supplier
        ADJUSTMENT ('adjustment'): Manual correction (never synthesized)
    """
    ORDER = 'order'
    RESTOCK = 'restock'
    ADJUSTMENT = 'adjustment'

    def __str__(self):
        """Return the string value of the enum."""
        return self.value

class OrderStatus(enum.Enum):
    PENDING = 'pending'
    PROCESSING = 'processing'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'

class PaymentStatus(enum.Enum):
    PENDING = 'pending'
    PAID = 'paid'
    FAILED = 'failed'
    REFUNDED = 'refunded'

class ShippingMethod(enum.Enum):
    STANDARD = 'Standard'
    EXPRESS = 'Express'
    NEXT_DAY = 'Next Day'
    PICKUP = 'Pickup'

class Category(Base):
    __tablename__ = 'categories'

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(Text, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    products = relationship("Product", back_populates="category")

class Supplier(Base):
    __tablename__ = 'suppliers'

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(Text, nullable=False)
    contact_name = Column(Text)
    email = Column(Text)
    phone = Column(Text)
    address = Column(Text)
    lead_time_days = Column(Integer, nullable=False, default=7)
    reliability_score = Column(Float, nullable=False, default=90.0)
    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    products = relationship("Product", back_populates="supplier")

class Product(Base):
    __tablename__ = 'products'

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(Text, nullable=False)
    description = Column(Text)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    category_id = Column(String(36), ForeignKey('categories.id'))

    # Fields the frontend expects on top of the base catalogue
    sku = Column(Text)
    low_stock_threshold = Column(Integer, default=10)
    supplier_id = Column(String(36), ForeignKey('suppliers.id'))
    lead_time_days = Column(Integer, default=7)

    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="products")
    supplier = relationship("Supplier", back_populates="products")
    order_items = relationship("OrderItem", back_populates="product")
    history = relationship("ProductHistory", back_populates="product")
    forecasts = relationship("Forecast", back_populates="product")

class Order(Base):
    __tablename__ = 'orders'

    id = Column(String(36), primary_key=True, default=new_uuid)
    status = Column(Enum(OrderStatus, values_callable=_enum_values, native_enum=False), nullable=False)
    total_amount = Column(Float, default=0.0)

    customer_name = Column(Text)
    customer_email = Column(Text)
    shipping_address = Column(Text)
    shipping_method = Column(Enum(ShippingMethod, values_callable=_enum_values, native_enum=False))
    notes = Column(Text)
    payment_status = Column(
        Enum(PaymentStatus, values_callable=_enum_values, native_enum=False),
        default=PaymentStatus.PENDING
    )

    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now())

    items = relationship("OrderItem", back_populates="order")

class OrderItem(Base):
    __tablename__ = 'order_items'

    id = Column(String(36), primary_key=True, default=new_uuid)
    order_id = Column(String(36), ForeignKey('orders.id'))
    product_id = Column(String(36), ForeignKey('products.id'))
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=func.now())

    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")

    __table_args__ = (
        Index('idx_order_items_product', 'product_id'),
    )

class LeadTimeTracking(Base):
    """Supplier delivery performance per product. Created for the application, not seeded."""
    __tablename__ = 'lead_time_tracking'

    id = Column(String(36), primary_key=True, default=new_uuid)
    supplier_id = Column(String(36), ForeignKey('suppliers.id'))
    product_id = Column(String(36), ForeignKey('products.id'))
    order_date = Column(DateTime(timezone=True))
    expected_delivery_date = Column(DateTime(timezone=True))
    actual_delivery_date = Column(DateTime(timezone=True))
    expected_lead_time_days = Column(Integer)
    actual_lead_time_days = Column(Integer)
    created_at = Column(DateTime(timezone=True), default=func.now())

class Forecast(Base):
    """Monthly demand forecast per product."""
    __tablename__ = 'forecasting'

    id = Column(String(36), primary_key=True, default=new_uuid)
    product_id = Column(String(36), ForeignKey('products.id'))
    date = Column(Date, nullable=False)
    predicted_demand = Column(Integer, nullable=False)
    confidence_score = Column(Float)
    model_type = Column(Text)
    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    product = relationship("Product", back_populates="forecasts")

    __table_args__ = (
        Index('idx_forecasting_product_date', 'product_id', 'date'),
    )

class ProductHistory(Base):
    """Stock ledger: on-hand quantity after each stock movement."""
    __tablename__ = 'product_history'

    id = Column(String(36), primary_key=True, default=new_uuid)
    product_id = Column(String(36), ForeignKey('products.id'))
    date = Column(Date, nullable=False)
    quantity = Column(Integer, nullable=False)  # quantity on hand after the change
    change_amount = Column(Integer, nullable=False)
    change_type = Column(Enum(ChangeType, values_callable=_enum_values, native_enum=False), nullable=False)
    reference_id = Column(String(36))  # order id for ORDER rows
    created_at = Column(DateTime(timezone=True), default=func.now())

    product = relationship("Product", back_populates="history")

    __table_args__ = (
        Index('idx_product_history_product_date', 'product_id', 'date'),
    )
