from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from smartinventory.catalog.models import Product
from .models import StockMovement
from .serializers import StockMovementSerializer, StockChangeSerializer
from . import services

RECENT_LIMIT = 10


def _movements():
    return StockMovement.objects.select_related('product')


@api_view(['GET'])
def stock_list(request):
    """List all stock movements, newest first"""
    serializer = StockMovementSerializer(_movements(), many=True)
    return Response(serializer.data)


@api_view(['GET'])
def stock_detail(request, pk):
    movement = get_object_or_404(_movements(), pk=pk)
    return Response(StockMovementSerializer(movement).data)


@api_view(['POST'])
def stock_add(request):
    serializer = StockChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    movement = services.add_stock(
        data['product_id'], data['quantity'], data.get('reason'), data.get('reference')
    )
    return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
def stock_remove(request):
    serializer = StockChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    movement = services.remove_stock(
        data['product_id'], data['quantity'], data.get('reason'), data.get('reference')
    )
    return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def stock_by_product(request, product_id):
    movements = _movements().filter(product_id=product_id)
    return Response(StockMovementSerializer(movements, many=True).data)


@api_view(['GET'])
def stock_recent(request):
    movements = _movements()[:RECENT_LIMIT]
    return Response(StockMovementSerializer(movements, many=True).data)


@api_view(['GET'])
def stock_current(request, product_id):
    product = get_object_or_404(Product, pk=product_id)
    return Response({
        'product_id': product.id,
        'product_name': product.name,
        'current_stock': services.current_stock(product),
    })


@api_view(['GET'])
def stock_additions(request):
    movements = _movements().filter(movement_type=StockMovement.MOVEMENT_IN)
    return Response(StockMovementSerializer(movements, many=True).data)


@api_view(['GET'])
def stock_removals(request):
    movements = _movements().filter(movement_type=StockMovement.MOVEMENT_OUT)
    return Response(StockMovementSerializer(movements, many=True).data)
