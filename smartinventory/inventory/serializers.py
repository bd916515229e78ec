from rest_framework import serializers
from .models import StockMovement


class StockMovementSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)

    class Meta:
        model = StockMovement
        fields = ['id', 'product', 'product_name', 'product_sku', 'quantity', 'movement_type',
                  'reason', 'reference', 'created_at']
        read_only_fields = fields


class StockChangeSerializer(serializers.Serializer):
    """Payload of stock/add and stock/remove"""
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
