import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from course_checkout.errors import CheckoutError
from course_checkout.services import create_order, verify_payment

logger = logging.getLogger(__name__)

router = APIRouter()

CREATE_ORDER_FAILED = "Unable to create order"
VERIFY_FAILED = "Server error verifying payment"


class CreateOrderRequest(BaseModel):
    amount: Optional[int] = None
    currency: Optional[str] = None
    receipt: Optional[str] = None
    notes: Optional[dict] = None
    course_slug: Optional[str] = None
    user_id: Optional[Union[str, int]] = None


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None


def get_gateway(request: Request):
    return request.app.state.gateway


def get_store(request: Request):
    return request.app.state.store


def order_error(status_code, message):
    return JSONResponse(status_code=status_code, content={"error": message})


def verify_error(status_code, message):
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@router.get("/", response_class=PlainTextResponse)
def health():
    return "Course checkout backend is running"


@router.post("/create-order")
def create_order_api(request: CreateOrderRequest, gateway=Depends(get_gateway)):
    logger.info(
        "Create order request: amount=%s course=%s user=%s",
        request.amount, request.course_slug, request.user_id,
    )
    try:
        return create_order(
            gateway,
            amount=request.amount,
            course_slug=request.course_slug,
            user_id=request.user_id,
            currency=request.currency,
            receipt=request.receipt,
            notes=request.notes,
        )
    except CheckoutError as exc:
        if exc.status_code < 500:
            return order_error(exc.status_code, exc.message)
        logger.error("Create order error: %s", exc)
        return order_error(exc.status_code, CREATE_ORDER_FAILED)
    except Exception:
        logger.exception("Create order error")
        return order_error(500, CREATE_ORDER_FAILED)


@router.post("/verify-payment")
def verify_payment_api(
    request: VerifyPaymentRequest,
    gateway=Depends(get_gateway),
    store=Depends(get_store),
):
    try:
        verify_payment(
            gateway,
            store,
            order_id=request.razorpay_order_id,
            payment_id=request.razorpay_payment_id,
            signature=request.razorpay_signature,
        )
    except CheckoutError as exc:
        if exc.status_code >= 500:
            logger.error("Verify error: %s", exc)
        return verify_error(exc.status_code, exc.message)
    except Exception:
        logger.exception("Verify error")
        return verify_error(500, VERIFY_FAILED)
    return {"success": True}
