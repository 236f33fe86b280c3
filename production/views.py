"""
Production — Views

DRF ViewSet for the production ledger: list, create, retrieve, update
(PUT and PATCH both partial) and destroy. Validation happens here; all
ledger rules live in ProductionLedgerService.

@file production/views.py
"""

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .serializers import (
    ProductionCreateSerializer,
    ProductionDataReadSerializer,
    ProductionQuerySerializer,
    ProductionUpdateSerializer,
)
from .services import ProductionLedgerService


class ProductionDataViewSet(viewsets.ViewSet):
    """
    Daily production records with their expenditures.
    stock and remains are derived server-side and never accepted as input.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    def list(self, request):
        query = ProductionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = ProductionLedgerService.list_records(
            filters=request.query_params,
            **query.validated_data,
        )
        return Response({
            'items': ProductionDataReadSerializer(result['items'], many=True).data,
            'pagination': result['pagination'],
        })

    def create(self, request):
        ser = ProductionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = ProductionLedgerService.create_record(**ser.validated_data)
        return Response(
            {
                'success': True,
                'data': ProductionDataReadSerializer(record).data,
                'message': 'Production data created successfully.',
            },
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, pk=None):
        record = ProductionLedgerService.get_record(int(pk))
        return Response(ProductionDataReadSerializer(record).data)

    def update(self, request, pk=None):
        ser = ProductionUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = ProductionLedgerService.update_record(int(pk), **ser.validated_data)
        return Response({
            'success': True,
            'data': ProductionDataReadSerializer(record).data,
            'message': 'Production data updated successfully.',
        })

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        ProductionLedgerService.delete_record(int(pk))
        return Response({
            'success': True,
            'data': None,
            'message': 'Production data deleted successfully.',
        })
