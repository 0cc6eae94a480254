# frontdesk/serializers.py

from rest_framework import serializers
from .models import InventoryItem, InventoryTransaction, Reservation, Table


# ==============================================================================
# Table Serializers
# ==============================================================================

class TableSerializer(serializers.ModelSerializer):
    """Serializer for the Table model. Status is changed through the `status` action only."""

    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Table
        fields = [
            'id',
            'table_number',
            'capacity',
            'status',
            'status_display',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        # Uniqueness is checked (case-insensitively normalised) by the table service
        extra_kwargs = {'table_number': {'validators': []}}


class TableStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Table.Status.choices)


class PartySizeSerializer(serializers.Serializer):
    party_size = serializers.IntegerField(min_value=1, required=False)


# ==============================================================================
# Reservation Serializers
# ==============================================================================

class ReservationSerializer(serializers.ModelSerializer):
    """
    Main serializer for reservations.
    `table` is the table's primary key; an unknown id is reported as not found.
    """

    table = serializers.IntegerField(source='table_id')
    table_number = serializers.CharField(source='table.table_number', read_only=True)
    status = serializers.ChoiceField(choices=Reservation.Status.choices, required=False)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Reservation
        fields = [
            'id',
            'customer_name',
            'customer_phone',
            'table',
            'table_number',
            'reservation_time',
            'party_size',
            'status',
            'status_display',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class ReservationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Reservation.Status.choices)


# ==============================================================================
# Inventory Serializers
# ==============================================================================

class InventoryItemSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id',
            'name',
            'category',
            'unit',
            'quantity',
            'low_stock_threshold',
            'is_low_stock',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {'name': {'validators': []}}


class InventoryItemUpdateSerializer(InventoryItemSerializer):
    """Quantity is read-only once the item exists; stock moves through transactions."""

    class Meta(InventoryItemSerializer.Meta):
        read_only_fields = ['id', 'quantity', 'created_at', 'updated_at']


class InventoryTransactionSerializer(serializers.ModelSerializer):
    type_display = serializers.CharField(source='get_type_display', read_only=True)

    class Meta:
        model = InventoryTransaction
        fields = [
            'id',
            'item',
            'type',
            'type_display',
            'quantity',
            'note',
            'created_by',
            'created_at',
        ]
        read_only_fields = ['id', 'item', 'created_by', 'created_at']
