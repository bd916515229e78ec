from decimal import Decimal

from django.db.models import Sum
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from smartinventory.core.exceptions import ResourceNotFound
from .models import Sale, SaleItem
from .serializers import (
    SaleSerializer, SaleItemSerializer, SaleCreateSerializer,
    SaleStatusSerializer, SaleItemUpdateSerializer
)
from . import services

RECENT_LIMIT = 10


def _sales():
    return Sale.objects.select_related('client').prefetch_related('items__product')


def _items():
    return SaleItem.objects.select_related('sale', 'product')


# Sale views
@api_view(['GET', 'POST'])
def sale_list_create(request):
    """List all sales or record a new one"""
    if request.method == 'GET':
        serializer = SaleSerializer(_sales(), many=True)
        return Response(serializer.data)

    serializer = SaleCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    sale = services.create_sale(**serializer.validated_data)
    return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
def sale_detail(request, pk):
    sale = services.get_sale(pk)
    if request.method == 'GET':
        return Response(SaleSerializer(sale).data)
    services.delete_sale(sale)
    return Response({'message': 'Sale deleted successfully'})


@api_view(['GET'])
def sale_by_reference(request, reference):
    sale = _sales().filter(sale_reference=reference).first()
    if sale is None:
        raise ResourceNotFound(f'Sale not found with reference: {reference}')
    return Response(SaleSerializer(sale).data)


@api_view(['PUT', 'PATCH'])
def sale_status(request, pk):
    sale = services.get_sale(pk)
    serializer = SaleStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    sale = services.update_sale_status(sale, serializer.validated_data['status'])
    return Response(SaleSerializer(sale).data)


@api_view(['GET'])
def sales_by_client(request, client_id):
    sales = _sales().filter(client_id=client_id)
    return Response(SaleSerializer(sales, many=True).data)


@api_view(['GET'])
def sales_by_status(request, sale_status):
    sales = _sales().filter(status=sale_status.upper())
    return Response(SaleSerializer(sales, many=True).data)


@api_view(['GET'])
def sales_pending(request):
    sales = _sales().filter(status=Sale.STATUS_PENDING)
    return Response(SaleSerializer(sales, many=True).data)


@api_view(['GET'])
def sales_recent(request):
    sales = _sales().order_by('-sale_date', '-id')[:RECENT_LIMIT]
    return Response(SaleSerializer(sales, many=True).data)


# Sale item views
@api_view(['GET'])
def sale_item_list(request):
    return Response(SaleItemSerializer(_items(), many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def sale_item_detail(request, pk):
    """Retrieve, update or delete a sale item"""
    item = get_object_or_404(_items(), pk=pk)

    if request.method == 'GET':
        return Response(SaleItemSerializer(item).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SaleItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = services.update_sale_item(item, **serializer.validated_data)
        return Response(SaleItemSerializer(item).data)
    else:  # DELETE
        services.delete_sale_item(item)
        return Response({'message': 'Sale item deleted successfully'})


@api_view(['GET'])
def sale_items_by_sale(request, sale_id):
    return Response(SaleItemSerializer(_items().filter(sale_id=sale_id), many=True).data)


@api_view(['GET'])
def sale_items_by_product(request, product_id):
    return Response(SaleItemSerializer(_items().filter(product_id=product_id), many=True).data)


@api_view(['GET'])
def product_quantity_sold(request, product_id):
    total = SaleItem.objects.filter(product_id=product_id).aggregate(total=Sum('quantity'))['total']
    return Response({'product_id': product_id, 'total_quantity_sold': total or 0})


@api_view(['GET'])
def product_revenue(request, product_id):
    total = SaleItem.objects.filter(product_id=product_id).aggregate(total=Sum('subtotal'))['total']
    return Response({'product_id': product_id, 'total_revenue': total or Decimal('0.00')})


@api_view(['GET'])
def top_selling_products(request):
    """Products ranked by units sold"""
    rows = (
        SaleItem.objects.values('product_id', 'product__name', 'product__sku')
        .annotate(total_quantity=Sum('quantity'))
        .order_by('-total_quantity', 'product_id')
    )
    return Response([
        {
            'product_id': row['product_id'],
            'product_name': row['product__name'],
            'sku': row['product__sku'],
            'total_quantity': row['total_quantity'],
        }
        for row in rows
    ])


@api_view(['GET'])
def sale_items_with_discount(request):
    return Response(SaleItemSerializer(_items().filter(discount__gt=0), many=True).data)


@api_view(['GET'])
def total_discounts(request):
    total = SaleItem.objects.aggregate(total=Sum('discount'))['total']
    return Response({'total_discounts': total or Decimal('0.00')})
