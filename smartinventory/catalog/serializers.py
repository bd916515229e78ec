from rest_framework import serializers
from .models import Category, Product, LOW_STOCK_THRESHOLD


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class ProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, default=None)
    current_stock = serializers.SerializerMethodField()
    profit_margin = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    is_low_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'name', 'description', 'brand', 'sku', 'cost_price', 'selling_price',
                  'category', 'category_name', 'supplier', 'supplier_name',
                  'current_stock', 'profit_margin', 'is_low_stock', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def stock_of(self, obj):
        # List views annotate stock_level; single objects fall back to a query
        stock = getattr(obj, 'stock_level', None)
        return obj.current_stock if stock is None else stock

    def get_current_stock(self, obj):
        return self.stock_of(obj)

    def get_is_low_stock(self, obj):
        return self.stock_of(obj) < LOW_STOCK_THRESHOLD

    def validate(self, attrs):
        cost_price = attrs.get('cost_price')
        selling_price = attrs.get('selling_price')
        for field, value in (('cost_price', cost_price), ('selling_price', selling_price)):
            if value is not None and value < 0:
                raise serializers.ValidationError({field: 'Price cannot be negative'})
        return attrs
