import logging

from django.db.models import Q, Sum, Value
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from smartinventory.core.exceptions import BusinessRuleError
from .filters import ProductFilter
from .models import Category, Product, LOW_STOCK_THRESHOLD
from .serializers import CategorySerializer, ProductSerializer

logger = logging.getLogger(__name__)


def with_stock(queryset):
    """Annotate each product with the signed sum of its stock movements"""
    return queryset.annotate(stock_level=Coalesce(Sum('stock_movements__quantity'), Value(0)))


# Category views
@api_view(['GET', 'POST'])
def category_list_create(request):
    """List all categories or create a new category"""
    if request.method == 'GET':
        categories = Category.objects.all()
        serializer = CategorySerializer(categories, many=True)
        return Response(serializer.data)
    else:
        serializer = CategorySerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def category_detail(request, pk):
    """Retrieve, update or delete a category"""
    category = get_object_or_404(Category, pk=pk)

    if request.method == 'GET':
        serializer = CategorySerializer(category)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CategorySerializer(category, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        category.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Product views
@api_view(['GET', 'POST'])
def product_list_create(request):
    """List all products or create a new product"""
    if request.method == 'GET':
        queryset = with_stock(Product.objects.select_related('category', 'supplier'))
        filterset = ProductFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response({'error': filterset.errors}, status=status.HTTP_400_BAD_REQUEST)
        serializer = ProductSerializer(filterset.qs, many=True)
        return Response(serializer.data)
    else:
        serializer = ProductSerializer(data=request.data)
        if serializer.is_valid():
            product = serializer.save()
            logger.info(f"Product created: {product.sku}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = get_object_or_404(Product.objects.select_related('category', 'supplier'), pk=pk)

    if request.method == 'GET':
        serializer = ProductSerializer(product)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProductSerializer(product, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        product.delete()
        logger.info(f"Product deleted: {product.sku}")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def product_by_sku(request, sku):
    product = get_object_or_404(Product, sku=sku)
    return Response(ProductSerializer(product).data)


@api_view(['GET'])
def product_search(request):
    """Products whose name, brand or SKU contains q"""
    query = request.query_params.get('q', '').strip()
    if not query:
        return Response([])
    products = with_stock(Product.objects.select_related('category', 'supplier')).filter(
        Q(name__icontains=query) | Q(brand__icontains=query) | Q(sku__icontains=query)
    )
    return Response(ProductSerializer(products, many=True).data)


@api_view(['GET'])
def products_by_category(request, category_id):
    products = with_stock(Product.objects.select_related('category', 'supplier')).filter(
        category_id=category_id
    )
    return Response(ProductSerializer(products, many=True).data)


@api_view(['GET'])
def products_by_supplier(request, supplier_id):
    products = with_stock(Product.objects.select_related('category', 'supplier')).filter(
        supplier_id=supplier_id
    )
    return Response(ProductSerializer(products, many=True).data)


@api_view(['GET'])
def product_low_stock(request):
    """Products whose stock is below ?threshold= (default 10)"""
    try:
        threshold = int(request.query_params.get('threshold', LOW_STOCK_THRESHOLD))
    except ValueError:
        raise BusinessRuleError('threshold must be an integer')
    products = with_stock(Product.objects.select_related('category', 'supplier')).filter(
        stock_level__lt=threshold
    )
    return Response(ProductSerializer(products, many=True).data)


@api_view(['GET'])
def product_stock(request, pk):
    product = get_object_or_404(Product, pk=pk)
    current_stock = product.current_stock
    return Response({
        'product_id': product.id,
        'product_name': product.name,
        'sku': product.sku,
        'current_stock': current_stock,
        'is_low_stock': current_stock < LOW_STOCK_THRESHOLD,
    })
