from rest_framework import serializers

MONEY = {'max_digits': 20, 'decimal_places': 2, 'allow_null': True}
RATIO = {'max_digits': 20, 'decimal_places': 4, 'allow_null': True}


class CategoryPerformanceSerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField(allow_null=True)
    revenue = serializers.DecimalField(**MONEY)
    cost = serializers.DecimalField(**MONEY)
    profit = serializers.DecimalField(**MONEY)
    roi = serializers.DecimalField(**RATIO)
    quantity = serializers.IntegerField(allow_null=True)


class ProductPerformanceSerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField(allow_null=True)
    quantity = serializers.IntegerField(allow_null=True)
    revenue = serializers.DecimalField(**MONEY)
    cost = serializers.DecimalField(**MONEY)
    profit = serializers.DecimalField(**MONEY)
    profit_margin = serializers.DecimalField(**RATIO)
    roi = serializers.DecimalField(**RATIO)


class SupplierPerformanceSerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField(allow_null=True)
    revenue = serializers.DecimalField(**MONEY)
    product_count = serializers.IntegerField(allow_null=True)


class StockStatusSerializer(serializers.Serializer):
    in_stock = serializers.IntegerField(allow_null=True)
    low_stock = serializers.IntegerField(allow_null=True)
    out_of_stock = serializers.IntegerField(allow_null=True)


class InventoryStatsSerializer(serializers.Serializer):
    total_items_in_stock = serializers.IntegerField(allow_null=True)
    total_inventory_value = serializers.DecimalField(**MONEY)
    average_profit_margin = serializers.DecimalField(**MONEY)
    total_items_sold = serializers.IntegerField(allow_null=True)


class SummaryMetricsSerializer(serializers.Serializer):
    total_revenue = serializers.DecimalField(**MONEY)
    total_profit = serializers.DecimalField(**MONEY)
    profit_margin_percent = serializers.DecimalField(**RATIO)
    roi_percent = serializers.DecimalField(**RATIO)
    turnover_rate = serializers.DecimalField(**RATIO)
    total_sales = serializers.IntegerField(allow_null=True)
    total_products = serializers.IntegerField(allow_null=True)


class RecommendationSerializer(serializers.Serializer):
    type = serializers.CharField(allow_null=True)
    icon = serializers.CharField(allow_null=True)
    title = serializers.CharField(allow_null=True)
    message = serializers.CharField(allow_null=True)
    action = serializers.CharField(allow_null=True)


class SalesTrendSerializer(serializers.Serializer):
    labels = serializers.ListField(child=serializers.DateField())
    revenue = serializers.ListField(child=serializers.DecimalField(max_digits=20, decimal_places=2))
    profit = serializers.ListField(child=serializers.DecimalField(max_digits=20, decimal_places=2))
