"""
Bambora hosted payment routes.

The redirect endpoints send the customer to the hosted payment page; the
two callback endpoints receive the gateway's result redirect and its
server-to-server notification. Keep this thin: no gateway details here.
"""
from __future__ import annotations

import ipaddress
from decimal import Decimal
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse, Response
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from api.dependencies import get_payment_service
from application.dtos.payments import ResultOutcome
from application.services.payment_service import PaymentService
from core.logging_config import get_logger
from core.response import success_response
from core.settings import payment_settings


router = APIRouter(prefix="/payments/bambora", tags=["Payments"])
logger = get_logger(__name__)


def _joined(values) -> dict[str, str]:
    """Repeated keys collapse to one comma-separated value."""
    params: dict[str, list[str]] = {}
    for key, value in values:
        if isinstance(value, str):
            params.setdefault(key, []).append(value)
    return {key: ",".join(items) for key, items in params.items()}


async def _collect_params(request: Request) -> dict[str, str]:
    """Query string merged with the form body; form values win.

    A body that cannot be parsed leaves only the query string.
    """
    params = _joined(request.query_params.multi_items())
    if request.method == "POST":
        try:
            form = await request.form()
        except (StarletteHTTPException, MultiPartException) as exc:
            logger.warning(
                "bambora_callback_body_unparseable",
                path=request.url.path,
                content_type=request.headers.get("content-type"),
                error=str(exc),
            )
            return params
        params.update(_joined(form.multi_items()))
    return params


def _is_ip_allowed(remote_ip: Optional[str], allowlist: list[str]) -> bool:
    if not allowlist:
        return True
    if not remote_ip:
        return False
    try:
        rip = ipaddress.ip_address(remote_ip)
    except ValueError:
        return False
    for entry in allowlist:
        if "/" in entry:
            try:
                if rip in ipaddress.ip_network(entry, strict=False):
                    return True
            except ValueError:
                logger.warning("webhook_allowlist_entry_invalid", entry=entry)
        elif remote_ip == entry:
            return True
    return False


def _result_redirect_url(outcome: ResultOutcome) -> str:
    cfg = payment_settings.bambora
    if outcome.redirect == "checkout_completed" and outcome.order_id is not None:
        sep = "&" if "?" in cfg.checkout_completed_url else "?"
        return f"{cfg.checkout_completed_url}{sep}{urlencode({'orderId': outcome.order_id})}"
    return cfg.home_url


@router.get("/orders/{order_id}/redirect", summary="Redirect to the hosted payment page")
async def redirect_to_gateway(order_id: int, service: PaymentService = Depends(get_payment_service)):
    redirect = await service.post_process_payment(order_id)
    return RedirectResponse(redirect.url, status_code=status.HTTP_302_FOUND)


@router.get("/orders/{order_id}/retry", summary="Re-post payment for an unpaid order")
async def repost_payment(order_id: int, service: PaymentService = Depends(get_payment_service)):
    redirect = await service.repost_payment(order_id)
    return RedirectResponse(redirect.url, status_code=status.HTTP_302_FOUND)


@router.api_route("/result-handler", methods=["GET", "POST"], summary="Customer return from the payment page")
async def result_handler(request: Request, service: PaymentService = Depends(get_payment_service)):
    params = await _collect_params(request)
    outcome = await service.handle_result(params)
    return RedirectResponse(_result_redirect_url(outcome), status_code=status.HTTP_302_FOUND)


@router.api_route(
    "/response-notification-handler",
    methods=["GET", "POST"],
    summary="Server-to-server payment notification",
)
async def response_notification_handler(request: Request, service: PaymentService = Depends(get_payment_service)):
    # The gateway only needs an answer; it never reads the body
    remote_ip = request.client.host if request.client else None
    if not _is_ip_allowed(remote_ip, payment_settings.webhook.ip_allowlist or []):
        logger.warning("bambora_notification_ip_not_allowed", remote_ip=remote_ip)
        return Response(status_code=status.HTTP_200_OK)

    params = await _collect_params(request)
    outcome = await service.handle_notification(params)
    logger.info("bambora_notification_handled", outcome=outcome.value)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/method", summary="Payment method information")
async def method_info(
    cart_total: Optional[Decimal] = Query(default=None, ge=0),
    service: PaymentService = Depends(get_payment_service),
):
    info = service.get_method_info(cart_total)
    return success_response(data=info.model_dump(mode="json"))
