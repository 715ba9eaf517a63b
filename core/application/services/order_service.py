"""Application service for Order operations."""

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.discount_dto import (
    AppliedDiscountDTO,
    DiscountCalculationDTO,
    LineItemDiscountDTO,
)
from core.application.dtos.order_dto import OrderDTO, OrderItemDTO
from core.data.uow import UnitOfWork, create_uow
from core.domain import state_machine
from core.domain.commands import (
    CancelOrderCommand,
    CreateOrderCommand,
    MarkDeliveredCommand,
    PlaceCounterOrderCommand,
    UpdateFulfillmentCommand,
    UpdateOrderCommand,
    UpdatePaymentCommand,
)
from core.domain.entities import (
    CustomerSnapshot,
    Order,
    OrderDiscount,
    OrderItem,
    Product,
    normalize_voucher,
)
from core.domain.enums import (
    FulfillmentStatus,
    FulfillmentType,
    PaymentStatus,
)
from core.domain.exceptions import ConflictError, NotFoundError, ValidationError
from core.domain.triggers import creation_event
from core.domain.value_objects import (
    OrderNumber,
    ReceiptNumber,
    next_document_number,
    quantize_money,
)
from core.settings.modules.storefront_settings import StorefrontSettings
from core.utils.datetime import utc_now

from .commission_service import CommissionAccrual
from .discount_engine import DiscountCalculationResult, DiscountEngine, PricedLine
from .ledger_poster import LedgerPoster
from .notification_scheduler import NotificationScheduler

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

# Counter orders are paid on the spot; this is how far fulfillment advances at creation.
_COUNTER_TARGETS: Dict[FulfillmentType, Tuple[FulfillmentStatus, ...]] = {
    FulfillmentType.INSTORE: (
        FulfillmentStatus.PROCESSING,
        FulfillmentStatus.SHIPPING,
        FulfillmentStatus.DELIVERED,
    ),
    FulfillmentType.PICKUP: (FulfillmentStatus.PROCESSING,),
    FulfillmentType.DELIVERY: (FulfillmentStatus.PROCESSING,),
}


class OrderApplicationService:
    """
    Application service for orchestrating order operations.

    Responsibilities:
    - Validate commands and state transitions before any write
    - Run each mutation in one transaction: order row, discount usage,
      ledger, commission and outbox rows commit or roll back together
    - Re-read the order under a row lock so decisions use committed state
    - Transform domain snapshots into DTOs
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        discount_engine: DiscountEngine,
        ledger_poster: LedgerPoster,
        commission: CommissionAccrual,
        scheduler: NotificationScheduler,
        storefront: StorefrontSettings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize order application service.

        Args:
            session_factory: SQLAlchemy async session factory
            discount_engine: Discount resolution
            ledger_poster: Payment and reversal postings
            commission: Affiliate commission accrual
            scheduler: Outbox scheduling for SMS notifications
            storefront: Numbering prefixes and customer-facing links
            clock: Source of "now" (naive UTC)
        """
        self._session_factory = session_factory
        self._discount_engine = discount_engine
        self._ledger = ledger_poster
        self._commission = commission
        self._scheduler = scheduler
        self._storefront = storefront
        self._clock = clock

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_order(self, command: CreateOrderCommand) -> OrderDTO:
        """Price, number and persist a new order, then queue ORDER_PLACED.

        Raises:
            NotFoundError: unknown product or customer id
            ValidationError: unavailable product
            ConflictError: a capped discount ran out, or a concurrent order
                took the same order number
        """
        uow = create_uow(self._session_factory)
        async with uow:
            now = self._clock()
            order = await self._build_order(uow, command, now)
            order = await self._accrue_commission(uow, order, now)

            event = creation_event(order.order_source, order.payment_status)
            await self._scheduler.schedule(uow, order, event, now=now)
            await uow.commit()

            logger.info(
                f"✅ [Order Service] Created order {order.order_number} "
                f"(total {order.total_payable}, execution {uow.execution_id})"
            )
            return self._order_to_dto(order, uow)

    async def place_counter_order(self, command: PlaceCounterOrderCommand) -> OrderDTO:
        """Create a walk-in order that is paid at creation.

        The order is receipted and posted to the ledger immediately. In-store
        purchases are handed over on the spot and end DELIVERED; the rest
        wait in PROCESSING.
        """
        uow = create_uow(self._session_factory)
        async with uow:
            now = self._clock()
            order = await self._build_order(uow, command.order, now)

            paid = state_machine.apply_payment(
                order, PaymentStatus.PAID, now, command.order.payment_method
            ).after
            for target in _COUNTER_TARGETS[order.fulfillment_type]:
                paid = state_machine.apply_fulfillment(paid, target, now).after

            paid = await self._issue_receipt(uow, paid, now)
            await self._save(uow, paid)
            await self._ledger.post_payment(uow, paid, now)
            paid = await self._accrue_commission(uow, paid, now)

            event = creation_event(paid.order_source, paid.payment_status)
            await self._scheduler.schedule(uow, paid, event, now=now)
            await uow.commit()

            logger.info(
                f"✅ [Order Service] Counter order {paid.order_number} paid with "
                f"{paid.payment_method.value}, receipt {paid.receipt_number}"
            )
            result = self._order_to_dto(paid, uow)

        if paid.fulfillment_status == FulfillmentStatus.DELIVERED:
            await self._increment_sales_counts(paid)
        return result

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    async def update_fulfillment_status(self, command: UpdateFulfillmentCommand) -> OrderDTO:
        """Move fulfillment along the adjacency table.

        Driver details are only taken for SHIPPING. DELIVERED goes through
        ``mark_delivered`` and CANCELED through ``cancel_order``.

        Raises:
            NotFoundError: unknown order
            ValidationError: illegal transition
        """
        if command.status == FulfillmentStatus.DELIVERED:
            return await self.mark_delivered(MarkDeliveredCommand(order_id=command.order_id))
        if command.status == FulfillmentStatus.CANCELED:
            return await self.cancel_order(CancelOrderCommand(order_id=command.order_id))

        details = {}
        if command.status == FulfillmentStatus.SHIPPING:
            details = {
                "driver_name": command.driver_name,
                "driver_phone": command.driver_phone,
                "vehicle_number": command.vehicle_number,
            }

        return await self._transition(
            command.order_id,
            lambda order, now: state_machine.apply_fulfillment(order, command.status, now, **details),
        )

    async def update_payment_status(self, command: UpdatePaymentCommand) -> OrderDTO:
        """Record a payment outcome.

        PAID allocates the receipt and posts the ledger (auto-confirming a
        PLACED order). FAILED cancels the order.

        Raises:
            ConflictError: order already paid or already canceled
            ValidationError: payment on a canceled order or a backwards move
        """
        if command.status == PaymentStatus.FAILED:
            return await self.cancel_order(
                CancelOrderCommand(
                    order_id=command.order_id,
                    reason=command.reason or "Payment failed",
                )
            )

        return await self._transition(
            command.order_id,
            lambda order, now: state_machine.apply_payment(
                order, command.status, now, command.payment_method
            ),
        )

    async def cancel_order(self, command: CancelOrderCommand) -> OrderDTO:
        """Cancel from any non-canceled state, reversing the ledger if receipted.

        Raises:
            ConflictError: order already canceled
        """
        return await self._transition(
            command.order_id,
            lambda order, now: state_machine.apply_cancellation(order, now, command.reason),
            reason=command.reason,
        )

    async def mark_delivered(self, command: MarkDeliveredCommand) -> OrderDTO:
        """SHIPPING -> DELIVERED with a fresh feedback token.

        Raises:
            ValidationError: order is not SHIPPING
        """
        token = uuid.uuid4().hex

        def deliver(order: Order, now: datetime) -> state_machine.Transition:
            if order.fulfillment_status != FulfillmentStatus.SHIPPING:
                raise ValidationError(
                    f"Order {order.order_number} must be SHIPPING to mark delivered, "
                    f"current status {order.fulfillment_status.value}"
                )
            return state_machine.apply_fulfillment(
                order, FulfillmentStatus.DELIVERED, now, feedback_token=token
            )

        return await self._transition(
            command.order_id,
            deliver,
            additional={"feedbackLink": self._storefront.feedback_link(token)},
        )

    async def update_order(self, command: UpdateOrderCommand) -> OrderDTO:
        """Edit notes, delivery cost or voucher while the order is not terminal.

        Raises:
            ValidationError: order is DELIVERED/CANCELED, or the delivery cost
                of a paid order would change
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await self._load_for_update(uow, command.order_id)
            now = self._clock()

            if order.fulfillment_status in state_machine.TERMINAL_STATES:
                raise ValidationError(
                    f"Order {order.order_number} is {order.fulfillment_status.value} "
                    f"and can no longer be edited"
                )

            changes = {}
            if command.internal_notes is not None:
                changes["internal_notes"] = command.internal_notes
            if command.delivery_notes is not None:
                changes["delivery_notes"] = command.delivery_notes
            if command.delivery_cost is not None and command.delivery_cost != order.delivery_cost:
                if order.payment_status == PaymentStatus.PAID:
                    raise ValidationError(
                        f"Order {order.order_number} is paid; its delivery cost cannot change"
                    )
                changes["delivery_cost"] = quantize_money(command.delivery_cost)
                changes["total_payable"] = self._total_payable(
                    order.subtotal, order.discount, changes["delivery_cost"]
                )
            voucher_changed = False
            if command.voucher_code is not None:
                voucher = normalize_voucher(command.voucher_code)
                voucher_changed = voucher != order.voucher_code
                changes["voucher_code"] = voucher

            if not changes:
                return self._order_to_dto(order, uow)

            updated = replace(order, updated_at=now, **changes)
            if voucher_changed or "delivery_cost" in changes:
                updated = await self._accrue_commission(uow, updated, now)
            await self._save(uow, updated)
            await uow.commit()

            logger.info(
                f"[Order Service] Updated order {updated.order_number}: {', '.join(sorted(changes))}"
            )
            return self._order_to_dto(updated, uow)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_order(self, order_id: int) -> OrderDTO:
        """Get order by ID.

        Raises:
            NotFoundError: unknown order
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id)
            if order is None:
                raise NotFoundError(f"Order {order_id} not found")
            return self._order_to_dto(order)

    async def list_orders(
        self,
        limit: int = 100,
        offset: int = 0,
        fulfillment_status: Optional[FulfillmentStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> List[OrderDTO]:
        """List orders with pagination, newest first."""
        uow = create_uow(self._session_factory)
        async with uow:
            orders = await uow.orders.list(
                limit=limit,
                offset=offset,
                fulfillment_status=fulfillment_status,
                payment_status=payment_status,
            )
            return [self._order_to_dto(order) for order in orders]

    async def calculate_order_discounts(
        self,
        items: Sequence[Tuple[int, int]],
        voucher_code: Optional[str] = None,
    ) -> DiscountCalculationDTO:
        """Read-only price preview for ``(product_id, quantity)`` pairs."""
        result = await self._discount_engine.calculate_order_discounts(items, voucher_code)
        return self._discounts_to_dto(result)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _transition(
        self,
        order_id: int,
        change: Callable[[Order, datetime], state_machine.Transition],
        reason: Optional[str] = None,
        additional: Optional[Dict[str, str]] = None,
    ) -> OrderDTO:
        """Lock, validate, apply effects, queue notifications, commit."""
        uow = create_uow(self._session_factory)
        async with uow:
            order = await self._load_for_update(uow, order_id)
            now = self._clock()
            transition = change(order, now)

            if not transition.changed:
                return self._order_to_dto(order, uow)

            after = transition.after
            if transition.payment_completed:
                after = await self._issue_receipt(uow, after, now)
            await self._save(uow, after)

            if transition.payment_completed:
                await self._ledger.post_payment(uow, after, now)
                after = await self._accrue_commission(uow, after, now)
            if transition.reversal_required:
                await self._ledger.post_reversal(uow, after, now, reason)

            await self._scheduler.schedule(uow, after, transition.event, additional, now)
            await uow.commit()

            logger.info(
                f"[Order Service] Order {after.order_number}: "
                f"{order.fulfillment_status.value}/{order.payment_status.value} -> "
                f"{after.fulfillment_status.value}/{after.payment_status.value}"
            )
            result = self._order_to_dto(after, uow)

        if transition.delivered:
            await self._increment_sales_counts(after)
        return result

    async def _load_for_update(self, uow: UnitOfWork, order_id: int) -> Order:
        order = await uow.orders.get(order_id, for_update=True)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    async def _save(self, uow: UnitOfWork, order: Order) -> None:
        try:
            await uow.orders.save(order)
        except IntegrityError as e:
            raise ConflictError(
                f"Order {order.order_number} conflicts with a concurrent update"
            ) from e

    async def _build_order(
        self,
        uow: UnitOfWork,
        command: CreateOrderCommand,
        now: datetime,
    ) -> Order:
        """Resolve products and customer, price the lines and insert the order."""
        products = await uow.catalog.get_products(line.product_id for line in command.items)
        lines = []
        for line in command.items:
            product: Optional[Product] = products.get(line.product_id)
            if product is None:
                raise NotFoundError(f"Product {line.product_id} not found")
            if not product.is_available:
                raise ValidationError(
                    f"Product {product.name} is not available",
                    {"product_id": product.id},
                )
            lines.append(PricedLine(product.id, line.quantity, product.price))

        pricing = await self._discount_engine.calculate(
            uow, lines, command.voucher_code, products=products
        )

        if command.customer.id is not None:
            customer = await uow.catalog.get_customer(command.customer.id)
            if customer is None:
                raise NotFoundError(f"Customer {command.customer.id} not found")
        else:
            customer = await uow.catalog.find_or_create_customer(
                command.customer.name, command.customer.phone, command.customer.email
            )

        items = tuple(
            OrderItem(
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                discount_applied=pricing.discount_for(line.product_id),
            )
            for line in lines
        )
        subtotal = quantize_money(sum((item.line_total for item in items), ZERO))
        delivery_cost = quantize_money(command.delivery_cost)

        prefix = self._storefront.order_number_prefix
        last = await uow.orders.last_order_number(prefix, now.year)
        order_number = next_document_number(OrderNumber, prefix, now.year, last)

        order = Order(
            id=None,
            order_number=str(order_number),
            customer=CustomerSnapshot(
                id=customer.id, name=customer.name, phone=customer.phone, email=customer.email
            ),
            order_source=command.order_source,
            fulfillment_type=command.fulfillment_type,
            items=items,
            subtotal=subtotal,
            discount=pricing.order_discount,
            delivery_cost=delivery_cost,
            total_payable=self._total_payable(subtotal, pricing.order_discount, delivery_cost),
            payment_method=command.payment_method,
            placed_at=now,
            voucher_code=command.voucher_code,
            shipping_address=command.shipping_address,
            delivery_notes=command.delivery_notes,
            internal_notes=command.internal_notes,
            created_at=now,
            updated_at=now,
        )

        try:
            order = await uow.orders.add(order)
        except IntegrityError as e:
            raise ConflictError(f"Order number {order.order_number} was taken concurrently") from e

        await self._record_discounts(uow, order, pricing, now)
        return order

    async def _record_discounts(
        self,
        uow: UnitOfWork,
        order: Order,
        pricing: DiscountCalculationResult,
        now: datetime,
    ) -> None:
        if not pricing.applied_discounts:
            return
        for applied in pricing.applied_discounts:
            if not await uow.discounts.increment_usage(applied.discount.id):
                raise ConflictError(
                    f"Discount {applied.discount.name} reached its usage limit",
                    {"discount_id": applied.discount.id},
                )
        await uow.orders.add_discounts(
            order.id,
            [
                OrderDiscount(
                    discount_id=applied.discount.id,
                    discount_amount=applied.amount,
                    discount_name=applied.discount.name,
                    discount_type=applied.discount.discount_type.value,
                    voucher_code=applied.discount.voucher_code,
                    applied_at=now,
                )
                for applied in pricing.applied_discounts
            ],
        )

    async def _issue_receipt(self, uow: UnitOfWork, order: Order, now: datetime) -> Order:
        """Allocate the receipt number once; a receipted order is returned as is."""
        if order.is_receipted:
            return order
        prefix = self._storefront.receipt_number_prefix
        last = await uow.orders.last_receipt_number(prefix, now.year)
        receipt = next_document_number(ReceiptNumber, prefix, now.year, last)
        return replace(order, receipt_generated=True, receipt_number=str(receipt))

    async def _accrue_commission(self, uow: UnitOfWork, order: Order, now: datetime) -> Order:
        linked = await self._commission.accrue(uow, order, now)
        if linked.affiliate_id != order.affiliate_id:
            await self._save(uow, linked)
        return linked

    async def _increment_sales_counts(self, order: Order) -> None:
        """Best-effort: runs after the status change has committed."""
        try:
            uow = create_uow(self._session_factory)
            async with uow:
                for item in order.items:
                    await uow.catalog.increment_sales_count(item.product_id, item.quantity)
                await uow.commit()
        except Exception as e:
            logger.error(
                f"❌ [Order Service] Failed to update sales counts for order "
                f"{order.order_number}: {type(e).__name__}: {e}",
                exc_info=True,
            )

    @staticmethod
    def _total_payable(subtotal: Decimal, order_discount: Decimal, delivery_cost: Decimal) -> Decimal:
        return quantize_money(max(ZERO, subtotal - order_discount) + delivery_cost)

    def _order_to_dto(self, order: Order, uow: Optional[UnitOfWork] = None) -> OrderDTO:
        """Transform Order domain entity to OrderDTO."""
        items = [
            OrderItemDTO(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                discount_applied=item.discount_applied,
                line_total=item.line_total,
            )
            for item in order.items
        ]

        return OrderDTO(
            id=order.id,
            order_number=order.order_number,
            customer_id=order.customer.id,
            customer_name=order.customer.name,
            customer_phone=order.customer.phone,
            customer_email=order.customer.email,
            order_source=order.order_source,
            fulfillment_type=order.fulfillment_type,
            items=items,
            subtotal=order.subtotal,
            discount=order.discount,
            delivery_cost=order.delivery_cost,
            total_payable=order.total_payable,
            fulfillment_status=order.fulfillment_status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            placed_at=order.placed_at,
            confirmed_at=order.confirmed_at,
            processing_at=order.processing_at,
            shipping_at=order.shipping_at,
            delivered_at=order.delivered_at,
            canceled_at=order.canceled_at,
            paid_at=order.paid_at,
            voucher_code=order.voucher_code,
            affiliate_id=order.affiliate_id,
            receipt_generated=order.receipt_generated,
            receipt_number=order.receipt_number,
            shipping_address=order.shipping_address,
            delivery_notes=order.delivery_notes,
            driver_name=order.driver_name,
            driver_phone=order.driver_phone,
            vehicle_number=order.vehicle_number,
            feedback_token=order.feedback_token,
            internal_notes=order.internal_notes,
            execution_id=str(uow.execution_id) if uow is not None else None,
        )

    @staticmethod
    def _discounts_to_dto(result: DiscountCalculationResult) -> DiscountCalculationDTO:
        return DiscountCalculationDTO(
            order_discount=result.order_discount,
            line_item_discounts=[
                LineItemDiscountDTO(
                    product_id=line.product_id,
                    amount=line.amount,
                    discount_id=line.discount_id,
                    discount_type=line.discount_type,
                )
                for line in result.line_item_discounts
            ],
            applied_discounts=[
                AppliedDiscountDTO(
                    discount_id=applied.discount.id,
                    name=applied.discount.name,
                    discount_type=applied.discount.discount_type,
                    amount=applied.amount,
                    voucher_code=applied.discount.voucher_code,
                )
                for applied in result.applied_discounts
            ],
            discount_breakdown=result.discount_breakdown,
            subtotal_before_discount=result.subtotal_before_discount,
            subtotal_after_discount=result.subtotal_after_discount,
            final_total=result.final_total,
        )
