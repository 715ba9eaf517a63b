"""Static mappers for domain entities ↔ database models."""

from decimal import Decimal
from typing import Any, Optional

from core.domain.entities import (
    Affiliate,
    AffiliateCommission,
    Customer,
    CustomerSnapshot,
    Discount,
    LedgerEntry,
    NotificationTemplate,
    Order,
    OrderDiscount,
    OrderItem,
    OutboxEntry,
    Product,
)
from core.domain.enums import (
    DiscountScope,
    DiscountType,
    DiscountValueType,
    FulfillmentStatus,
    FulfillmentType,
    LedgerEntryKind,
    OrderSource,
    OutboxEventType,
    OutboxStatus,
    PaymentMethod,
    PaymentStatus,
    TriggerEvent,
)

from .models import (
    AffiliateCommissionModel,
    AffiliateModel,
    CustomerModel,
    DiscountModel,
    LedgerEntryModel,
    OrderDiscountModel,
    OrderItemModel,
    OrderModel,
    OutboxModel,
    ProductModel,
    SmsTemplateModel,
)


def _dec(value: Any) -> Decimal:
    """Numeric columns come back as Decimal (or float on some drivers)."""
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _opt_dec(value: Any) -> Optional[Decimal]:
    return None if value is None else _dec(value)


def _enum(enum_cls, value):
    return None if value is None else enum_cls(value)


def _value(member) -> Optional[str]:
    return None if member is None else member.value


class OrderItemMapper:
    """Static mapper for OrderItem ↔ OrderItemModel transformation."""

    @staticmethod
    def to_domain(model: OrderItemModel) -> OrderItem:
        return OrderItem(
            id=model.id,
            product_id=model.product_id,
            quantity=model.quantity,
            unit_price=_dec(model.unit_price),
            discount_applied=_dec(model.discount_applied),
            line_total=_dec(model.line_total),
        )

    @staticmethod
    def to_persistence(entity: OrderItem) -> OrderItemModel:
        return OrderItemModel(
            product_id=entity.product_id,
            quantity=entity.quantity,
            unit_price=entity.unit_price,
            discount_applied=entity.discount_applied,
            line_total=entity.line_total,
        )


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation with nested items."""

    # Scalar fields written back on every save. Items and identity never change.
    MUTABLE_FIELDS = (
        "delivery_cost",
        "total_payable",
        "payment_method",
        "placed_at",
        "confirmed_at",
        "processing_at",
        "shipping_at",
        "delivered_at",
        "canceled_at",
        "paid_at",
        "voucher_code",
        "affiliate_id",
        "receipt_generated",
        "receipt_number",
        "delivery_notes",
        "driver_name",
        "driver_phone",
        "vehicle_number",
        "feedback_token",
        "internal_notes",
    )

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert ORM model to domain aggregate (with nested items).

        Args:
            model: OrderModel instance with ``customer`` and ``items`` loaded

        Returns:
            Order domain aggregate
        """
        customer = model.customer
        return Order(
            id=model.id,
            order_number=model.order_number,
            customer=CustomerSnapshot(
                id=model.customer_id,
                name=customer.name if customer else None,
                phone=customer.phone if customer else None,
                email=customer.email if customer else None,
            ),
            order_source=OrderSource(model.order_source),
            fulfillment_type=FulfillmentType(model.fulfillment_type),
            items=tuple(OrderItemMapper.to_domain(item) for item in model.items),
            subtotal=_dec(model.sub_total),
            discount=_dec(model.discount),
            delivery_cost=_dec(model.delivery_cost),
            total_payable=_dec(model.total_payable),
            fulfillment_status=FulfillmentStatus(model.fulfillment_status),
            payment_status=PaymentStatus(model.payment_status),
            payment_method=_enum(PaymentMethod, model.payment_method),
            placed_at=model.placed_at,
            confirmed_at=model.confirmed_at,
            processing_at=model.processing_at,
            shipping_at=model.shipping_at,
            delivered_at=model.delivered_at,
            canceled_at=model.canceled_at,
            paid_at=model.paid_at,
            voucher_code=model.voucher_code,
            affiliate_id=model.affiliate_id,
            receipt_generated=bool(model.receipt_generated),
            receipt_number=model.receipt_number,
            shipping_address=model.shipping_address,
            delivery_notes=model.delivery_notes,
            driver_name=model.driver_name,
            driver_phone=model.driver_phone,
            vehicle_number=model.vehicle_number,
            feedback_token=model.feedback_token,
            internal_notes=model.internal_notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_persistence(order: Order) -> OrderModel:
        """Convert a new domain aggregate to an ORM model (with items)."""
        model = OrderModel(
            order_number=order.order_number,
            customer_id=order.customer.id,
            order_source=order.order_source.value,
            fulfillment_type=order.fulfillment_type.value,
            sub_total=order.subtotal,
            discount=order.discount,
            shipping_address=order.shipping_address,
            fulfillment_status=order.fulfillment_status.value,
            payment_status=order.payment_status.value,
        )
        OrderMapper.update_persistence(order, model)
        model.items = [OrderItemMapper.to_persistence(item) for item in order.items]
        return model

    @staticmethod
    def update_persistence(order: Order, model: OrderModel) -> None:
        """Copy status and mutable fields onto an existing ORM model."""
        model.fulfillment_status = order.fulfillment_status.value
        model.payment_status = order.payment_status.value
        for name in OrderMapper.MUTABLE_FIELDS:
            value = getattr(order, name)
            if name == "payment_method":
                value = _value(value)
            setattr(model, name, value)


class OrderDiscountMapper:

    @staticmethod
    def to_domain(model: OrderDiscountModel) -> OrderDiscount:
        return OrderDiscount(
            id=model.id,
            order_id=model.order_id,
            discount_id=model.discount_id,
            discount_amount=_dec(model.discount_amount),
            discount_name=model.discount_name,
            discount_type=model.discount_type,
            voucher_code=model.voucher_code,
            applied_at=model.applied_at,
        )

    @staticmethod
    def to_persistence(entity: OrderDiscount, order_id: int) -> OrderDiscountModel:
        return OrderDiscountModel(
            order_id=order_id,
            discount_id=entity.discount_id,
            discount_amount=entity.discount_amount,
            discount_name=entity.discount_name,
            discount_type=entity.discount_type,
            voucher_code=entity.voucher_code,
            applied_at=entity.applied_at,
        )


class DiscountMapper:
    """Static mapper for Discount ↔ DiscountModel (associations included)."""

    @staticmethod
    def to_domain(model: DiscountModel) -> Discount:
        return Discount(
            id=model.id,
            name=model.name,
            description=model.description,
            discount_type=DiscountType(model.discount_type),
            value_type=DiscountValueType(model.value_type),
            value=_dec(model.discount_value),
            scope=DiscountScope(model.discount_scope),
            start_date=model.start_date,
            end_date=model.end_date,
            is_active=bool(model.is_active),
            voucher_code=model.voucher_code,
            max_usage_count=model.max_usage_count,
            min_order_value=_opt_dec(model.min_order_value),
            usage_count=model.usage_count or 0,
            product_ids=frozenset(p.id for p in model.products),
            category_ids=frozenset(c.id for c in model.categories),
            subcategory_ids=frozenset(s.id for s in model.subcategories),
        )

    @staticmethod
    def to_persistence(entity: Discount) -> DiscountModel:
        """Scalar columns only; the repository attaches associations."""
        return DiscountModel(
            name=entity.name,
            description=entity.description,
            discount_type=entity.discount_type.value,
            value_type=entity.value_type.value,
            discount_value=entity.value,
            discount_scope=entity.scope.value,
            start_date=entity.start_date,
            end_date=entity.end_date,
            is_active=entity.is_active,
            voucher_code=entity.voucher_code,
            max_usage_count=entity.max_usage_count,
            min_order_value=entity.min_order_value,
            usage_count=entity.usage_count,
        )


class CatalogMapper:

    @staticmethod
    def product_to_domain(model: ProductModel) -> Product:
        sub_category = model.sub_category
        return Product(
            id=model.id,
            name=model.name,
            price=_dec(model.price),
            is_available=bool(model.is_available),
            subcategory_id=model.sub_category_id,
            category_id=sub_category.category_id if sub_category else None,
            sales_count=model.sales_count or 0,
        )

    @staticmethod
    def customer_to_domain(model: CustomerModel) -> Customer:
        return Customer(id=model.id, name=model.name, phone=model.phone, email=model.email)


class TemplateMapper:

    @staticmethod
    def to_domain(model: SmsTemplateModel) -> NotificationTemplate:
        return NotificationTemplate(
            id=model.id,
            name=model.name,
            trigger_event=TriggerEvent(model.trigger_event),
            order_source=_enum(OrderSource, model.order_source),
            message=model.message,
            is_active=bool(model.is_active),
            send_count=model.send_count,
            send_delay=model.send_delay,
            priority=model.priority,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def update_persistence(entity: NotificationTemplate, model: SmsTemplateModel) -> None:
        model.name = entity.name
        model.trigger_event = entity.trigger_event.value
        model.order_source = _value(entity.order_source)
        model.message = entity.message
        model.is_active = entity.is_active
        model.send_count = entity.send_count
        model.send_delay = entity.send_delay
        model.priority = entity.priority


class OutboxMapper:

    @staticmethod
    def to_domain(model: OutboxModel) -> OutboxEntry:
        return OutboxEntry(
            id=model.id,
            event_type=OutboxEventType(model.event_type),
            order_id=model.order_id,
            payload=dict(model.payload or {}),
            scheduled_for=model.scheduled_for,
            status=OutboxStatus(model.status),
            retry_count=model.retry_count or 0,
            error_message=model.error_message,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_persistence(entity: OutboxEntry) -> OutboxModel:
        return OutboxModel(
            event_type=entity.event_type.value,
            order_id=entity.order_id,
            payload=entity.payload,
            scheduled_for=entity.scheduled_for,
            status=entity.status.value,
            retry_count=entity.retry_count,
            error_message=entity.error_message,
        )


class AccountingMapper:

    @staticmethod
    def ledger_to_domain(model: LedgerEntryModel) -> LedgerEntry:
        return LedgerEntry(
            id=model.id,
            account_code=model.account_code,
            order_id=model.order_id,
            kind=LedgerEntryKind(model.kind),
            debit=_dec(model.debit),
            credit=_dec(model.credit),
            entry_date=model.entry_date,
            description=model.description,
            reference_number=model.reference_number,
        )

    @staticmethod
    def ledger_to_persistence(entity: LedgerEntry) -> LedgerEntryModel:
        return LedgerEntryModel(
            account_code=entity.account_code,
            order_id=entity.order_id,
            kind=entity.kind.value,
            debit=entity.debit,
            credit=entity.credit,
            entry_date=entity.entry_date,
            description=entity.description,
            reference_number=entity.reference_number,
        )

    @staticmethod
    def affiliate_to_domain(model: AffiliateModel) -> Affiliate:
        return Affiliate(
            id=model.id,
            name=model.name,
            voucher_code=model.voucher_code,
            commission_percentage=_dec(model.commission_percentage),
            is_active=bool(model.is_active),
        )

    @staticmethod
    def commission_to_domain(model: AffiliateCommissionModel) -> AffiliateCommission:
        return AffiliateCommission(
            id=model.id,
            affiliate_id=model.affiliate_id,
            order_id=model.order_id,
            order_total=_dec(model.order_total),
            commission_percentage=_dec(model.commission_percentage),
            commission_amount=_dec(model.commission_amount),
            order_date=model.order_date,
            payment_status=PaymentStatus(model.payment_status),
        )

    @staticmethod
    def update_commission(entity: AffiliateCommission, model: AffiliateCommissionModel) -> None:
        model.affiliate_id = entity.affiliate_id
        model.order_id = entity.order_id
        model.order_total = entity.order_total
        model.commission_percentage = entity.commission_percentage
        model.commission_amount = entity.commission_amount
        model.order_date = entity.order_date
        model.payment_status = entity.payment_status.value
