from decimal import Decimal

from rest_framework import serializers
from .models import Sale, SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    sale_reference = serializers.CharField(source='sale.sale_reference', read_only=True)
    discount_percentage = serializers.DecimalField(max_digits=6, decimal_places=2, read_only=True)

    class Meta:
        model = SaleItem
        fields = ['id', 'sale', 'sale_reference', 'product', 'product_name', 'product_sku', 'quantity',
                  'unit_price', 'discount', 'discount_percentage', 'subtotal']
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True, default=None)
    items = SaleItemSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = ['id', 'client', 'client_name', 'sale_reference', 'total_amount', 'status',
                  'payment_method', 'notes', 'sale_date', 'items', 'created_at', 'updated_at']
        read_only_fields = fields


class SaleItemInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    # Defaults to the product's selling price
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'),
                                          required=False, allow_null=True)
    discount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'),
                                        required=False, default=Decimal('0.00'))


class SaleCreateSerializer(serializers.Serializer):
    client_id = serializers.IntegerField(required=False, allow_null=True)
    sale_reference = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    status = serializers.ChoiceField(choices=Sale.STATUS_CHOICES, required=False, default=Sale.STATUS_PENDING)
    payment_method = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    sale_date = serializers.DateTimeField(required=False, allow_null=True)
    items = SaleItemInputSerializer(many=True, required=False, default=list)

    def to_internal_value(self, data):
        # Status is accepted in any case
        if hasattr(data, 'get') and isinstance(data.get('status'), str):
            data = data.copy()
            data['status'] = data['status'].upper()
        return super().to_internal_value(data)


class SaleStatusSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, value):
        value = value.upper()
        if value not in dict(Sale.STATUS_CHOICES):
            raise serializers.ValidationError(f'Unknown status: {value}')
        return value


class SaleItemUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1, required=False)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)
    discount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)
