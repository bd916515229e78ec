from decimal import Decimal

from django.db.models import Count, Q, Sum, Value, DecimalField
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .models import Client, Supplier
from .serializers import ClientSerializer, SupplierSerializer


def with_product_count(queryset):
    return queryset.annotate(product_total=Count('products'))


# Supplier views
@api_view(['GET', 'POST'])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        suppliers = with_product_count(Supplier.objects.all())
        serializer = SupplierSerializer(suppliers, many=True)
        return Response(serializer.data)
    else:
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        serializer = SupplierSerializer(supplier)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        supplier.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def supplier_search(request):
    query = request.query_params.get('q', '').strip()
    if not query:
        return Response([])
    suppliers = with_product_count(Supplier.objects.filter(name__icontains=query))
    return Response(SupplierSerializer(suppliers, many=True).data)


# Client views
@api_view(['GET', 'POST'])
def client_list_create(request):
    """List all clients or create a new client"""
    if request.method == 'GET':
        clients = Client.objects.all()
        serializer = ClientSerializer(clients, many=True)
        return Response(serializer.data)
    else:
        serializer = ClientSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def client_detail(request, pk):
    """Retrieve, update or delete a client"""
    client = get_object_or_404(Client, pk=pk)

    if request.method == 'GET':
        serializer = ClientSerializer(client)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ClientSerializer(client, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        client.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def client_search(request):
    """Clients whose name or company contains q"""
    query = request.query_params.get('q', '').strip()
    if not query:
        return Response([])
    clients = Client.objects.filter(Q(name__icontains=query) | Q(company__icontains=query))
    return Response(ClientSerializer(clients, many=True).data)


@api_view(['GET'])
def client_top(request):
    """Clients ordered by what they have spent, biggest first"""
    clients = Client.objects.annotate(
        spent=Coalesce(
            Sum('sales__total_amount'),
            Value(Decimal('0.00')),
            output_field=DecimalField(max_digits=12, decimal_places=2),
        )
    ).order_by('-spent', 'name')
    return Response(ClientSerializer(clients, many=True).data)
