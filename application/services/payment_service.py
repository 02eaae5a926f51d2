"""
Application service orchestrating the hosted payment use-cases.

This class depends only on the application PaymentGateway port, the
domain repositories reached through the Unit of Work, and DTOs. The gateway
implementation is provided by infrastructure and injected from the
composition root (API), keeping dependencies one-way.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

from application.dtos.payments import (
    BillingContact,
    InboundNotification,
    NotificationOutcome,
    PaymentMethodInfo,
    ResultOutcome,
    SignedRedirect,
)
from application.ports.payment_gateway import PaymentGateway
from core.logging_config import get_logger
from domain.common.exceptions import OrderNotFoundException, PaymentRePostNotAllowedException
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.order.entity import Order, OrderNote, OrderStatus, PaymentStatus
from domain.order.service import OrderProcessingService
from domain.payment.money import amounts_match, format_amount, round_money


logger = get_logger(__name__)

RESULT_NOTE_HEADER = "Bambora payment result:"
NOTIFICATION_NOTE_HEADER = "Bambora response notification:"


def _format_note(header: str, notification: InboundNotification) -> str:
    return f"{header}\n{notification.as_lines()}"


class PaymentService:
    def __init__(
        self,
        gateway: PaymentGateway,
        uow_factory: Callable[..., AbstractUnitOfWork],
    ) -> None:
        self.gateway = gateway
        self._uow_factory = uow_factory

    async def _billing_contact(self, uow: AbstractUnitOfWork, order: Order) -> Optional[BillingContact]:
        if order.billing_address_id is None:
            return None
        address = await uow.address_repository.get_by_id(order.billing_address_id)
        if address is None:
            return None

        province_code = None
        if address.state_province_id is not None:
            state = await uow.state_province_repository.get_by_id(address.state_province_id)
            province_code = state.abbreviation if state else None

        country_code = None
        if address.country_id is not None:
            country = await uow.country_repository.get_by_id(address.country_id)
            country_code = country.two_letter_iso_code if country else None

        return BillingContact(
            first_name=address.first_name,
            last_name=address.last_name,
            email=address.email,
            phone=address.phone_number,
            address1=address.address1,
            address2=address.address2,
            city=address.city,
            province_code=province_code,
            country_code=country_code,
            postal_code=address.zip_postal_code,
        )

    async def post_process_payment(self, order_id: int) -> SignedRedirect:
        """Build the signed redirect to the hosted payment page for an order."""
        async with self._uow_factory(readonly=True) as uow:
            order = await uow.order_repository.get_by_id(order_id)
            if order is None:
                raise OrderNotFoundException(order_id)
            contact = await self._billing_contact(uow, order)

        request = self.gateway.create_request(order.id, order.order_total, contact)
        redirect = self.gateway.build_redirect(request)
        logger.info(
            "payment_redirect_request",
            order_id=order.id,
            provider=self.gateway.provider,
            amount=format_amount(order.order_total),
        )
        return redirect

    async def repost_payment(self, order_id: int, now: Optional[datetime] = None) -> SignedRedirect:
        """Send the customer back to the payment page for an unpaid order."""
        async with self._uow_factory(readonly=True) as uow:
            order = await uow.order_repository.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundException(order_id)

        allowed = (
            not order.deleted
            and order.order_status != OrderStatus.CANCELLED
            and order.payment_status == PaymentStatus.PENDING
            and self.gateway.can_repost_payment(order, now)
        )
        if not allowed:
            logger.info(
                "payment_repost_rejected",
                order_id=order_id,
                order_status=order.order_status.value,
                payment_status=order.payment_status.value,
            )
            raise PaymentRePostNotAllowedException(order_id)
        return await self.post_process_payment(order_id)

    async def handle_result(self, params: Mapping[str, Any]) -> ResultOutcome:
        """Browser return from the payment page: record the fields, never change state."""
        try:
            notification = self.gateway.parse_notification(params)
            order_id = notification.order_number()
            if order_id is None:
                return ResultOutcome(redirect="home")

            async with self._uow_factory() as uow:
                order = await uow.order_repository.get_by_id(order_id)
                if order is None:
                    return ResultOutcome(redirect="home")
                await uow.order_repository.add_note(
                    OrderNote(order_id=order.id, note=_format_note(RESULT_NOTE_HEADER, notification))
                )
            return ResultOutcome(redirect="checkout_completed", order_id=order.id)
        except Exception:
            logger.exception("bambora_result_failed")
            return ResultOutcome(redirect="home")

    async def handle_notification(self, params: Mapping[str, Any]) -> NotificationOutcome:
        """Server-to-server notification: the only path allowed to mark an order paid.

        Safe to receive repeatedly; the paid guard is evaluated against the
        order as currently stored on every call.
        """
        try:
            return await self._handle_notification(self.gateway.parse_notification(params))
        except Exception:
            logger.exception("bambora_notification_failed")
            return NotificationOutcome.FAILED

    async def _handle_notification(self, notification: InboundNotification) -> NotificationOutcome:
        order_id = notification.order_number()
        if order_id is None:
            logger.info("bambora_notification_invalid_order_number", trn_order_number=notification.trn_order_number)
            return NotificationOutcome.INVALID_ORDER_NUMBER

        # The field dump commits in its own unit of work, apart from the paid transition
        async with self._uow_factory() as uow:
            order = await uow.order_repository.get_by_id(order_id)
            if order is None:
                logger.error(
                    "bambora_notification_order_not_found",
                    order_id=order_id,
                    fields=notification.as_lines(),
                )
                return NotificationOutcome.ORDER_NOT_FOUND

            await uow.order_repository.add_note(
                OrderNote(order_id=order.id, note=_format_note(NOTIFICATION_NOTE_HEADER, notification))
            )

        amount = notification.amount()
        if amount is None:
            logger.error(
                "bambora_notification_invalid_amount",
                order_id=order.id,
                message_text=notification.message_text,
                trn_amount=notification.trn_amount,
            )
            return NotificationOutcome.INVALID_AMOUNT

        if not amounts_match(amount, order.order_total):
            logger.error(
                "bambora_notification_amount_mismatch",
                order_id=order.id,
                notification_amount=format_amount(amount),
                order_total=format_amount(order.order_total),
            )
            return NotificationOutcome.AMOUNT_MISMATCH

        if not notification.approved:
            logger.info("bambora_notification_not_approved", order_id=order.id, message_id=notification.message_id)
            return NotificationOutcome.NOT_APPROVED

        async with self._uow_factory() as uow:
            # Re-read inside the transaction that applies the transition
            order = await uow.order_repository.get_by_id(order_id)
            if order is None:
                logger.error("bambora_notification_order_not_found", order_id=order_id, fields=notification.as_lines())
                return NotificationOutcome.ORDER_NOT_FOUND

            processing = OrderProcessingService(uow.order_repository)
            if not processing.can_mark_order_as_paid(order):
                logger.info(
                    "bambora_notification_not_payable",
                    order_id=order.id,
                    payment_status=order.payment_status.value,
                )
                return NotificationOutcome.NOT_PAYABLE

            order.authorization_transaction_id = notification.trn_id
            order = await uow.order_repository.update(order)
            await processing.mark_order_as_paid(order)

        logger.info(
            "bambora_notification_marked_as_paid",
            order_id=order_id,
            transaction_id=notification.trn_id,
            amount=format_amount(round_money(amount)),
        )
        return NotificationOutcome.MARKED_AS_PAID

    def get_method_info(self, cart_total: Optional[Decimal] = None) -> PaymentMethodInfo:
        return self.gateway.get_method_info(cart_total)
