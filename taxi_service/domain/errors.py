"""
Domain error taxonomy.

Every error a core operation can raise on purpose derives from
``DomainError``.  Each class carries the HTTP-equivalent ``status_code`` and
a stable ``code`` so any transport adapter can translate it without
inspecting messages.
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    status_code: int = 400
    code: str = "domain_error"
    default_message: str = "Request could not be processed"

    def __init__(self, message: Optional[str] = None, **details: Any):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


# ── Validation ────────────────────────────────────────────────────────


class ValidationError(DomainError):
    code = "validation_error"


class SameRegionRoute(ValidationError):
    code = "same_region_route"
    default_message = "From and To regions must be different"


class InvalidScheduleDate(ValidationError):
    code = "invalid_schedule_date"
    default_message = "Invalid date format, use DD.MM.YYYY"


class InvalidAmount(ValidationError):
    code = "invalid_amount"
    default_message = "Amount must be positive"


# ── Not found ─────────────────────────────────────────────────────────


class NotFound(DomainError):
    status_code = 404
    code = "not_found"


class OrderNotFound(NotFound):
    code = "order_not_found"
    default_message = "Order not found"


class DriverNotFound(NotFound):
    code = "driver_not_found"
    default_message = "Driver profile not found"


class NotificationNotFound(NotFound):
    code = "notification_not_found"
    default_message = "Notification not found"


# ── Permissions ───────────────────────────────────────────────────────


class Unauthenticated(DomainError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Authentication required"


class Forbidden(DomainError):
    status_code = 403
    code = "forbidden"
    default_message = "Not allowed for this role"


class DriverInactive(Forbidden):
    code = "driver_inactive"
    default_message = "Driver account is not active"


# ── State conflicts ───────────────────────────────────────────────────


class InvalidStateTransition(DomainError):
    """Raised when an order status change violates the state machine."""

    status_code = 409
    code = "invalid_state_transition"


class OrderNotAvailable(DomainError):
    code = "order_not_available"
    default_message = "Order is no longer available"


class AcceptDeadlineExpired(DomainError):
    code = "accept_deadline_expired"
    default_message = "Order acceptance deadline has passed"


class OrderAlreadyProcessed(DomainError):
    status_code = 409
    code = "order_already_processed"
    default_message = "Order was already processed, refresh the order list"


class OrderNotFoundOrNotYours(DomainError):
    code = "order_not_found_or_not_yours"
    default_message = "Order not found or not assigned to you"


class CannotCancel(DomainError):
    code = "cannot_cancel"
    default_message = "Cannot cancel order in current status"


class OrderNotRateable(DomainError):
    code = "order_not_rateable"
    default_message = "Can only rate completed orders with a driver"


class AlreadyRated(DomainError):
    status_code = 409
    code = "already_rated"
    default_message = "Order already rated"


# ── Business rules ────────────────────────────────────────────────────


class InsufficientBalance(DomainError):
    code = "insufficient_balance"
    default_message = "Insufficient balance to accept order"


class PricingNotConfigured(DomainError):
    code = "pricing_not_configured"
    default_message = "Pricing not configured for this route"
