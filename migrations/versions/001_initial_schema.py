"""Initial schema: reference data, drivers, orders, ledger, ratings, notifications.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated: bool = False) -> list[sa.Column]:
    columns = [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now())
    ]
    if updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now())
        )
    return columns


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("phone_number", sa.String(20), unique=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("is_blocked", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    # ── regions / districts ───────────────────────────────────────────
    op.create_table(
        "regions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name_uz_lat", sa.String(100), nullable=False),
        sa.Column("name_uz_cyr", sa.String(100), nullable=False),
        sa.Column("name_ru", sa.String(100), nullable=False),
    )
    op.create_table(
        "districts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "region_id",
            sa.Integer,
            sa.ForeignKey("regions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name_uz_lat", sa.String(100), nullable=False),
        sa.Column("name_uz_cyr", sa.String(100), nullable=False),
        sa.Column("name_ru", sa.String(100), nullable=False),
    )
    op.create_index("idx_districts_region", "districts", ["region_id"])

    # ── drivers ───────────────────────────────────────────────────────
    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("car_model", sa.String(100), nullable=False, server_default=""),
        sa.Column("car_number", sa.String(20), nullable=False, server_default=""),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("rating", sa.Numeric(3, 2), nullable=False, server_default="0"),
        sa.Column("total_ratings", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(updated=True),
    )

    # ── orders ────────────────────────────────────────────────────────
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "driver_id",
            sa.Integer,
            sa.ForeignKey("drivers.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("order_type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("customer_name", sa.String(100), nullable=False),
        sa.Column("customer_phone", sa.String(20), nullable=False),
        sa.Column("recipient_phone", sa.String(20), nullable=True),
        sa.Column("from_region_id", sa.Integer, sa.ForeignKey("regions.id"), nullable=False),
        sa.Column("from_district_id", sa.Integer, sa.ForeignKey("districts.id"), nullable=False),
        sa.Column("from_latitude", sa.Float, nullable=True),
        sa.Column("from_longitude", sa.Float, nullable=True),
        sa.Column("from_address", sa.String(255), nullable=True),
        sa.Column("to_region_id", sa.Integer, sa.ForeignKey("regions.id"), nullable=False),
        sa.Column("to_district_id", sa.Integer, sa.ForeignKey("districts.id"), nullable=False),
        sa.Column("to_latitude", sa.Float, nullable=True),
        sa.Column("to_longitude", sa.Float, nullable=True),
        sa.Column("to_address", sa.String(255), nullable=True),
        sa.Column("passenger_count", sa.Integer, nullable=True),
        sa.Column("delivery_type", sa.String(20), nullable=True),
        sa.Column("scheduled_date", sa.Date, nullable=False),
        sa.Column("time_range_start", sa.String(10), nullable=False),
        sa.Column("time_range_end", sa.String(10), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("service_fee", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("final_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("cancellation_reason", sa.Text, nullable=True),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("accept_deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=True),
    )
    op.create_index("idx_orders_status_deadline", "orders", ["status", "accept_deadline"])
    op.create_index("idx_orders_user", "orders", ["user_id"])
    op.create_index("idx_orders_driver", "orders", ["driver_id"])
    op.create_index("idx_orders_route", "orders", ["from_region_id", "to_region_id"])

    # ── pricing / discounts ───────────────────────────────────────────
    op.create_table(
        "pricing",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("from_region_id", sa.Integer, sa.ForeignKey("regions.id"), nullable=False),
        sa.Column("to_region_id", sa.Integer, sa.ForeignKey("regions.id"), nullable=False),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("price_per_person", sa.Numeric(12, 2), nullable=False),
        sa.Column("service_fee", sa.Numeric(5, 2), nullable=False),
        *_timestamps(updated=True),
        sa.UniqueConstraint("from_region_id", "to_region_id", name="uq_pricing_route"),
    )
    op.create_table(
        "discounts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("passenger_count", sa.Integer, unique=True, nullable=False),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=False),
        sa.CheckConstraint("passenger_count BETWEEN 1 AND 4", name="ck_discount_passengers"),
    )

    # ── transactions (driver ledger) ──────────────────────────────────
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "driver_id",
            sa.Integer,
            sa.ForeignKey("drivers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id"), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_transactions_driver", "transactions", ["driver_id"])
    op.create_index("idx_transactions_order", "transactions", ["order_id"])

    # ── ratings ───────────────────────────────────────────────────────
    op.create_table(
        "ratings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "order_id",
            sa.Integer,
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "driver_id",
            sa.Integer,
            sa.ForeignKey("drivers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        *_timestamps(),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_rating_range"),
    )
    op.create_index("idx_ratings_driver", "ratings", ["driver_id"])

    # ── notifications ─────────────────────────────────────────────────
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("related_id", sa.Integer, nullable=True),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("idx_notifications_user", "notifications", ["user_id"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("ratings")
    op.drop_table("transactions")
    op.drop_table("discounts")
    op.drop_table("pricing")
    op.drop_table("orders")
    op.drop_table("drivers")
    op.drop_table("districts")
    op.drop_table("regions")
    op.drop_table("users")
