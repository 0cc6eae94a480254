"""
REST API (Django REST Framework) mounted under /api/v1/.

Writes go through the service layer; domain errors are turned into HTTP
responses by ``frontdesk_exception_handler``.
"""
import logging

from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler

from . import services
from .exceptions import InternalError, NotFound, ValidationError
from .permissions import HasFrontDeskRole
from .serializers import (
    InventoryItemSerializer, InventoryItemUpdateSerializer, InventoryTransactionSerializer,
    PartySizeSerializer, ReservationSerializer, ReservationStatusSerializer,
    TableSerializer, TableStatusSerializer,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# ERROR MAPPING
# ==============================================================================

def frontdesk_exception_handler(exc, context):
    """DRF exception handler that also understands front desk domain errors."""
    if isinstance(exc, ValidationError):
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, NotFound):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, InternalError):
        logger.error(f"Internal error in {context.get('view').__class__.__name__}: {exc!r}")
        return Response({"detail": InternalError.default_message},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return exception_handler(exc, context)


class FrontDeskViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated, HasFrontDeskRole]
    lookup_value_regex = r"\d+"


# ==============================================================================
# TABLES
# ==============================================================================

class TableViewSet(mixins.ListModelMixin, FrontDeskViewSet):
    serializer_class = TableSerializer

    def get_queryset(self):
        return services.list_tables()

    def retrieve(self, request, pk=None):
        return Response(self.get_serializer(services.get_table(pk)).data)

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = services.create_table(**serializer.validated_data)
        return Response(self.get_serializer(table).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def status(self, request, pk=None):
        payload = TableStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        table = services.set_table_status(pk, payload.validated_data["status"])
        return Response(self.get_serializer(table).data)

    @action(detail=False, methods=["get"])
    def available(self, request):
        params = PartySizeSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        party_size = params.validated_data.get("party_size")
        tables = (
            services.available_tables_for_party(party_size)
            if party_size else services.available_tables()
        )
        return Response(self.get_serializer(tables, many=True).data)


# ==============================================================================
# RESERVATIONS
# ==============================================================================

class ReservationViewSet(mixins.ListModelMixin, FrontDeskViewSet):
    serializer_class = ReservationSerializer

    def get_queryset(self):
        return services.reservations_by_status(self.request.query_params.get("status") or None)

    def retrieve(self, request, pk=None):
        return Response(self.get_serializer(services.get_reservation(pk)).data)

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        reservation = services.create_reservation(
            table_id=data["table_id"],
            customer_name=data["customer_name"],
            customer_phone=data["customer_phone"],
            reservation_time=data["reservation_time"],
            party_size=data["party_size"],
            status=data.get("status"),
        )
        return Response(self.get_serializer(reservation).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def status(self, request, pk=None):
        payload = ReservationStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        reservation = services.update_reservation_status(pk, payload.validated_data["status"])
        return Response(self.get_serializer(reservation).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        reservation = services.cancel_reservation(pk)
        return Response(self.get_serializer(reservation).data)

    @action(detail=False, methods=["get"])
    def today(self, request):
        reservations = services.reservations_for_date(timezone.localdate())
        return Response(self.get_serializer(reservations, many=True).data)


# ==============================================================================
# INVENTORY
# ==============================================================================

class InventoryItemViewSet(mixins.ListModelMixin, FrontDeskViewSet):
    serializer_class = InventoryItemSerializer

    def get_queryset(self):
        return services.list_items()

    def get_serializer_class(self):
        if self.action in ("update", "partial_update"):
            return InventoryItemUpdateSerializer
        if self.action == "transactions":
            return InventoryTransactionSerializer
        return super().get_serializer_class()

    def retrieve(self, request, pk=None):
        return Response(self.get_serializer(services.get_item(pk)).data)

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = services.create_item(**serializer.validated_data)
        return Response(self.get_serializer(item).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        item = services.get_item(pk)
        serializer = self.get_serializer(item, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        item = services.update_item(pk, **serializer.validated_data)
        return Response(InventoryItemSerializer(item).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        services.delete_item(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get", "post"])
    def transactions(self, request, pk=None):
        if request.method == "GET":
            records = services.transactions_for_item(pk)
            return Response(self.get_serializer(records, many=True).data)

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = services.record_transaction(
            pk,
            serializer.validated_data["type"],
            serializer.validated_data["quantity"],
            note=serializer.validated_data.get("note", ""),
            created_by=request.user.get_username(),
        )
        return Response(self.get_serializer(record).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def low_stock(self, request):
        return Response(self.get_serializer(services.low_stock_items(), many=True).data)
