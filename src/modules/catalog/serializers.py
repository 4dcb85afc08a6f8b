"""Catalog DRF serializers (output only).

Input is validated by the Pydantic DTOs in ``dtos.py``; these serializers
render products in the storefront's camelCase shape.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.models import Product


class ProductSerializer(serializers.ModelSerializer):
    multipleOf = serializers.IntegerField(source="multiple_of", read_only=True)
    status = serializers.CharField(source="stock_status", read_only=True)

    class Meta:
        model = Product
        fields = ["id", "name", "category", "strength", "stock", "multipleOf", "status"]
        read_only_fields = fields
