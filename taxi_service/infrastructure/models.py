"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``users``         -- accounts owned by the auth collaborator (role, block flag)
* ``regions`` / ``districts`` -- reference data orders point at
* ``drivers``       -- driver profile, balance and rating aggregate
* ``orders``        -- taxi and delivery orders with their lifecycle fields
* ``pricing``       -- directed route tariffs
* ``discounts``     -- passenger-count discounts for taxi orders
* ``transactions``  -- append-only driver ledger
* ``ratings``       -- one customer rating per completed order
* ``notifications`` -- stored notification inbox

Indexes
-------
* **B-Tree** on ``orders.status`` + ``accept_deadline`` for the new-orders
  feed and the expiry sweep, on ``user_id`` / ``driver_id`` for history
  listings, and on ``transactions.driver_id`` for ledger reads.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)

from .database import Base
from taxi_service.domain.entities import Order
from taxi_service.domain.enums import (
    DeliveryType,
    DriverStatus,
    NotificationKind,
    OrderStatus,
    OrderType,
    TransactionKind,
    UserRole,
)


def _str_enum(enum_cls, name: str) -> Enum:
    """Store the enum *value* (``"pending"``) as VARCHAR."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
    )


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    phone_number = Column(String(20), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    role = Column(_str_enum(UserRole, "userrole"), default=UserRole.USER, nullable=False)
    is_blocked = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RegionModel(Base):
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name_uz_lat = Column(String(100), nullable=False)
    name_uz_cyr = Column(String(100), nullable=False)
    name_ru = Column(String(100), nullable=False)


class DistrictModel(Base):
    __tablename__ = "districts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="CASCADE"), nullable=False)
    name_uz_lat = Column(String(100), nullable=False)
    name_uz_cyr = Column(String(100), nullable=False)
    name_ru = Column(String(100), nullable=False)

    __table_args__ = (Index("idx_districts_region", "region_id"),)


class DriverModel(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    full_name = Column(String(200), nullable=False)
    car_model = Column(String(100), nullable=False, default="")
    car_number = Column(String(20), nullable=False, default="")
    # Mutated only by the ledger, always together with a transactions row
    balance = Column(Numeric(12, 2), default=0, nullable=False)
    rating = Column(Numeric(3, 2), default=0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)
    status = Column(_str_enum(DriverStatus, "driverstatus"), default=DriverStatus.PENDING, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    driver_id = Column(Integer, ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True)
    order_type = Column(_str_enum(OrderType, "ordertype"), nullable=False)
    status = Column(
        _str_enum(OrderStatus, "orderstatus"), default=OrderStatus.PENDING, nullable=False
    )

    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    recipient_phone = Column(String(20), nullable=True)

    from_region_id = Column(Integer, ForeignKey("regions.id"), nullable=False)
    from_district_id = Column(Integer, ForeignKey("districts.id"), nullable=False)
    from_latitude = Column(Float, nullable=True)
    from_longitude = Column(Float, nullable=True)
    from_address = Column(String(255), nullable=True)
    to_region_id = Column(Integer, ForeignKey("regions.id"), nullable=False)
    to_district_id = Column(Integer, ForeignKey("districts.id"), nullable=False)
    to_latitude = Column(Float, nullable=True)
    to_longitude = Column(Float, nullable=True)
    to_address = Column(String(255), nullable=True)

    passenger_count = Column(Integer, nullable=True)
    delivery_type = Column(_str_enum(DeliveryType, "deliverytype"), nullable=True)

    scheduled_date = Column(Date, nullable=False)
    time_range_start = Column(String(10), nullable=False)
    time_range_end = Column(String(10), nullable=False)

    price = Column(Numeric(12, 2), nullable=False)
    service_fee = Column(Numeric(12, 2), nullable=False)
    discount_percentage = Column(Numeric(5, 2), default=0, nullable=False)
    final_price = Column(Numeric(12, 2), nullable=False)

    notes = Column(Text, nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    accepted_at = Column(DateTime(timezone=True), nullable=True)
    accept_deadline = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_orders_status_deadline", "status", "accept_deadline"),
        Index("idx_orders_user", "user_id"),
        Index("idx_orders_driver", "driver_id"),
        Index("idx_orders_route", "from_region_id", "to_region_id"),
    )

    def to_entity(self) -> Order:
        return Order(
            id=self.id,
            user_id=self.user_id,
            driver_id=self.driver_id,
            order_type=OrderType(self.order_type),
            status=OrderStatus(self.status),
            service_fee=self.service_fee,
            accept_deadline=self.accept_deadline,
        )


class PricingModel(Base):
    __tablename__ = "pricing"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_region_id = Column(Integer, ForeignKey("regions.id"), nullable=False)
    to_region_id = Column(Integer, ForeignKey("regions.id"), nullable=False)
    base_price = Column(Numeric(12, 2), nullable=False)
    price_per_person = Column(Numeric(12, 2), nullable=False)
    service_fee = Column(Numeric(5, 2), nullable=False)  # percentage

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("from_region_id", "to_region_id", name="uq_pricing_route"),
    )


class DiscountModel(Base):
    __tablename__ = "discounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    passenger_count = Column(Integer, unique=True, nullable=False)
    discount_percentage = Column(Numeric(5, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("passenger_count BETWEEN 1 AND 4", name="ck_discount_passengers"),
    )


class TransactionModel(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    driver_id = Column(Integer, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)  # signed
    kind = Column(_str_enum(TransactionKind, "transactionkind"), nullable=False)
    description = Column(Text, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_transactions_driver", "driver_id"),
        Index("idx_transactions_order", "order_id"),
    )


class RatingModel(Base):
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    driver_id = Column(Integer, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_rating_range"),
        Index("idx_ratings_driver", "driver_id"),
    )


class NotificationModel(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    kind = Column(_str_enum(NotificationKind, "notificationkind"), nullable=False)
    related_id = Column(Integer, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_notifications_user", "user_id"),)
