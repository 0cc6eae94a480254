"""
Inventory ledger.

Item quantities only move through ``record_transaction``; every movement is
appended to the item's transaction history in the same database transaction.
"""
from django.db import transaction

from ..exceptions import ValidationError
from ..models import InventoryItem, InventoryTransaction
from .base import audit, get_or_404, require_int, require_text, service, validate_model

EDITABLE_FIELDS = ("name", "category", "unit", "low_stock_threshold")


def _non_negative(value, label):
    if value is None:
        return 0
    value = require_int(value, label)
    if value < 0:
        raise ValidationError(f"{label} cannot be negative.")
    return value


def list_items():
    return InventoryItem.objects.order_by("name")


def get_item(item_id):
    return get_or_404(InventoryItem.objects.all(), item_id)


def low_stock_items():
    return list_items().low_stock()


@service
@transaction.atomic
def create_item(*, name, unit, category="", quantity=0, low_stock_threshold=0):
    name = require_text(name, "Name")
    if InventoryItem.objects.name_taken(name):
        raise ValidationError(f"An inventory item named '{name}' already exists.")

    item = InventoryItem(
        name=name,
        unit=require_text(unit, "Unit"),
        category=(category or "").strip(),
        quantity=_non_negative(quantity, "Quantity"),
        low_stock_threshold=_non_negative(low_stock_threshold, "Low stock threshold"),
    )
    validate_model(item)
    item.save()
    audit.info("Inventory item '%s' created with %s %s", item.name, item.quantity, item.unit)
    return item


@service
@transaction.atomic
def update_item(item_id, **changes):
    """Update descriptive fields. Quantity is not editable here."""
    item = get_or_404(InventoryItem.objects.select_for_update(), item_id)

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(
            f"Cannot update {', '.join(sorted(unknown))}; record a transaction to change stock."
        )

    if "name" in changes:
        name = require_text(changes["name"], "Name")
        if InventoryItem.objects.name_taken(name, exclude_pk=item.pk):
            raise ValidationError(f"An inventory item named '{name}' already exists.")
        changes["name"] = name
    if "unit" in changes:
        changes["unit"] = require_text(changes["unit"], "Unit")
    if "low_stock_threshold" in changes:
        changes["low_stock_threshold"] = _non_negative(changes["low_stock_threshold"], "Low stock threshold")

    for field, value in changes.items():
        setattr(item, field, value)
    validate_model(item)
    item.save()
    audit.info("Inventory item #%s updated", item.pk)
    return item


@service
@transaction.atomic
def delete_item(item_id):
    item = get_or_404(InventoryItem.objects.all(), item_id)
    name = item.name
    item.delete()
    audit.info("Inventory item '%s' deleted", name)


@service
@transaction.atomic
def record_transaction(item_id, type, quantity, note="", created_by=""):
    """
    Apply a stock movement and log it.

    IN adds ``quantity``, OUT removes it (refused if stock would go negative),
    ADJUSTMENT sets the stock to exactly ``quantity``.
    """
    if type not in InventoryTransaction.Type.values:
        raise ValidationError(f"Unknown transaction type '{type}'.")
    quantity = require_int(quantity, "Transaction quantity")
    if quantity < 1:
        raise ValidationError("Transaction quantity must be at least 1.")

    item = get_or_404(InventoryItem.objects.select_for_update(), item_id)
    before = item.quantity

    if type == InventoryTransaction.Type.IN:
        item.quantity = before + quantity
    elif type == InventoryTransaction.Type.OUT:
        if quantity > before:
            raise ValidationError(
                f"Insufficient stock for {item.name}: {before} {item.unit} available, {quantity} requested."
            )
        item.quantity = before - quantity
    else:
        item.quantity = quantity

    item.save(update_fields=["quantity", "updated_at"])
    record = InventoryTransaction.objects.create(
        item=item,
        type=type,
        quantity=quantity,
        note=(note or "")[:255],
        created_by=(created_by or "")[:100],
    )

    audit.info(
        "[Inventory] %s %s %s of %s (%s -> %s)",
        type, quantity, item.unit, item.name, before, item.quantity,
    )
    if item.is_low_stock:
        audit.warning("[Inventory] %s is low on stock (%s %s)", item.name, item.quantity, item.unit)
    return record


def transactions_for_item(item_id):
    item = get_or_404(InventoryItem.objects.all(), item_id)
    return item.transactions.order_by("-created_at", "-id")
