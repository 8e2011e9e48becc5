"""Order creation, payment verification and course access grants.

The functions here take the gateway and store as arguments so the route
layer (and tests) decide which instances are used.
"""
import logging
import time
from collections import namedtuple

from course_checkout.errors import (
    CourseNotFound,
    MetadataMissing,
    SignatureMismatch,
    ValidationError,
)

logger = logging.getLogger(__name__)

OrderMetadata = namedtuple("OrderMetadata", ["course_slug", "user_id"])

DEFAULT_CURRENCY = "INR"


def default_receipt():
    return "order_rcpt_%d" % int(time.time() * 1000)


def _valid_amount(amount):
    return isinstance(amount, int) and not isinstance(amount, bool) and amount > 0


def create_order(
    gateway,
    amount,
    course_slug,
    user_id,
    currency=None,
    receipt=None,
    notes=None,
) -> dict:
    if not _valid_amount(amount) or not course_slug or not user_id:
        raise ValidationError(message="Amount, course_slug and user_id are required")

    order_notes = dict(notes or {})
    order_notes["course_slug"] = course_slug
    order_notes["user_id"] = str(user_id)

    order = gateway.create_order(
        amount=amount,
        currency=currency or DEFAULT_CURRENCY,
        receipt=receipt or default_receipt(),
        notes=order_notes,
    )
    logger.info("Order created: %s user=%s course=%s", order.get("id"), user_id, course_slug)
    return order


def fetch_order_metadata(gateway, order_id) -> OrderMetadata:
    order = gateway.fetch_order(order_id)
    notes = order.get("notes")
    # Razorpay sends an empty list when an order has no notes.
    if not isinstance(notes, dict):
        notes = {}

    course_slug = notes.get("course_slug")
    user_id = notes.get("user_id")
    if not course_slug or not user_id:
        logger.error("Order %s has no course_slug/user_id in its notes", order_id)
        raise MetadataMissing(f"order {order_id} missing course_slug or user_id")
    return OrderMetadata(course_slug=course_slug, user_id=user_id)


def grant_access(store, course_slug, user_id):
    """Give ``user_id`` access to the course with ``course_slug``.

    Granting twice is not an error. Returns the resolved course id.
    """
    course_id = store.find_course_id(course_slug)
    if course_id is None:
        logger.error("Course not found for slug %r", course_slug)
        raise CourseNotFound(f"no course with slug {course_slug!r}")

    if store.insert_grant(user_id, course_id):
        logger.info("Course access granted: user=%s course_id=%s", user_id, course_id)
    else:
        logger.info("User %s already has course_id=%s", user_id, course_id)
    return course_id


def verify_payment(gateway, store, order_id, payment_id, signature) -> dict:
    if not order_id or not payment_id or not signature:
        raise ValidationError(message="Missing payment details")

    if not gateway.verify_signature(order_id, payment_id, signature):
        logger.warning("Invalid signature for order %s payment %s", order_id, payment_id)
        raise SignatureMismatch(f"signature mismatch for order {order_id}")

    logger.info("Payment verified: order=%s payment=%s", order_id, payment_id)

    metadata = fetch_order_metadata(gateway, order_id)
    course_id = grant_access(store, metadata.course_slug, metadata.user_id)
    return {"course_id": course_id, "user_id": metadata.user_id}
