"""Order DRF serializers (output only).

Submission input is validated by the Pydantic DTOs in ``dtos.py``.
Order records are rendered in the storefront's camelCase record shape::

    {orderNumber, customerName, storeName, email, phone,
     items: [{id, name, strength, quantity}], timestamp}
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Order records
# ---------------------------------------------------------------------------


class OrderLineSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source="product_id", read_only=True)
    name = serializers.CharField(source="product_name", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "name", "strength", "quantity"]
        read_only_fields = fields


class OrderLineDetailSerializer(OrderLineSerializer):
    requestedQuantity = serializers.IntegerField(source="requested_quantity", read_only=True)

    class Meta(OrderLineSerializer.Meta):
        fields = [*OrderLineSerializer.Meta.fields, "requestedQuantity"]
        read_only_fields = fields


class OrderRecordSerializer(serializers.ModelSerializer):
    orderNumber = serializers.CharField(source="order_number", read_only=True)
    customerName = serializers.CharField(source="customer_name", read_only=True)
    storeName = serializers.CharField(source="store_name", read_only=True)
    items = OrderLineSerializer(many=True, read_only=True)
    timestamp = serializers.DateTimeField(source="submitted_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "orderNumber",
            "customerName",
            "storeName",
            "email",
            "phone",
            "items",
            "timestamp",
        ]
        read_only_fields = fields


class OrderDetailSerializer(OrderRecordSerializer):
    """Admin view of one order, including what each line originally requested."""

    items = OrderLineDetailSerializer(many=True, read_only=True)


# ---------------------------------------------------------------------------
# Submission outcome
# ---------------------------------------------------------------------------


class SubmissionLineSerializer(serializers.Serializer):
    id = serializers.CharField(source="product_id")
    requestedQuantity = serializers.IntegerField(source="requested")
    quantity = serializers.IntegerField(source="applied")
    clamped = serializers.BooleanField()


class SubmissionResultSerializer(serializers.Serializer):
    orderNumber = serializers.CharField(source="order_number")
    status = serializers.CharField()
    lines = SubmissionLineSerializer(many=True)
    timestamp = serializers.DateTimeField(source="order.submitted_at")
