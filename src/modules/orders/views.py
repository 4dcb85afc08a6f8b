"""Order API views.

``POST /api/v1/orders/`` is the public submission entry point.  History,
detail and invoice redelivery are admin-only.  Domain exceptions are
translated into HTTP responses using the standard error envelope:

- ``ValidationFailed`` -> 400
- ``CommitFailed`` -> 409
- ``PersistenceUnavailable`` -> 503
"""

from __future__ import annotations

from rest_framework import serializers, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.core.exceptions import error_response, field_errors
from modules.core.pagination import OrderHistoryPagination
from modules.inventory.ledger import DjangoStockLedger
from modules.invoices.services import build_dispatcher
from modules.orders.exceptions import (
    CommitFailed,
    OrderNotFound,
    PersistenceUnavailable,
    ValidationFailed,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    OrderDetailSerializer,
    OrderRecordSerializer,
    SubmissionResultSerializer,
)
from modules.orders.services import OrderHistoryService, OrderSubmissionService

RETRY_AFTER_SECONDS = "1"


def _single_error(error_type: str, code: str, detail: str, status_code: int) -> Response:
    return error_response(
        error_type, [{"code": code, "detail": detail, "attr": None}], status_code
    )


class OrderViewSet(GenericViewSet):
    """Order submission and history.

    Uses the order services with their Django-backed collaborators (DIP);
    no ORM access happens in the view.
    """

    serializer_class = OrderRecordSerializer
    pagination_class = OrderHistoryPagination
    lookup_field = "order_number"
    lookup_value_regex = "[A-Za-z0-9-]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        orders = OrderDjangoRepository()
        self._submission = OrderSubmissionService(
            order_repository=orders,
            product_repository=ProductDjangoRepository(),
            stock_ledger=DjangoStockLedger(),
        )
        self._history = OrderHistoryService(order_repository=orders)

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_throttles(self):
        if self.action == "create":
            self.throttle_scope = "order_submission"
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Submission (public)
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        try:
            result = self._submission.submit_order(request.data)
        except ValidationFailed as exc:
            return error_response(
                "validation_error",
                field_errors(exc.errors),
                status.HTTP_400_BAD_REQUEST,
            )
        except CommitFailed as exc:
            return _single_error(
                "client_error", "commit_failed", str(exc), status.HTTP_409_CONFLICT
            )
        except PersistenceUnavailable:
            response = _single_error(
                "server_error",
                "persistence_unavailable",
                "The order could not be saved right now; please retry.",
                status.HTTP_503_SERVICE_UNAVAILABLE,
            )
            response["Retry-After"] = RETRY_AFTER_SECONDS
            return response

        return Response(
            SubmissionResultSerializer(result).data,
            status=status.HTTP_201_CREATED,
        )

    # ------------------------------------------------------------------
    # History (admin)
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/?limit=&offset="""
        paginator = self.pagination_class()
        limit = paginator.get_limit(request)
        offset = paginator.get_offset(request)
        orders, total = self._history.list_orders(limit, offset)
        paginator.set_window(request, limit, offset, total)
        return paginator.get_paginated_response(OrderRecordSerializer(orders, many=True).data)

    def retrieve(self, request: Request, order_number: str | None = None) -> Response:
        """GET /api/v1/orders/{order_number}/"""
        try:
            order = self._history.get_order(order_number)
        except OrderNotFound as exc:
            return _single_error(
                "client_error", "not_found", str(exc), status.HTTP_404_NOT_FOUND
            )
        return Response(OrderDetailSerializer(order).data)

    @action(detail=True, methods=["post"], url_path="redeliver")
    def redeliver(self, request: Request, order_number: str | None = None) -> Response:
        """POST /api/v1/orders/{order_number}/redeliver/

        Runs invoice dispatch synchronously.  ``{"force": true}`` re-sends
        an invoice that was already delivered.
        """
        force = serializers.BooleanField().to_internal_value(
            request.data.get("force", False)
        )
        try:
            outcome = build_dispatcher().dispatch(order_number, force=force)
        except OrderNotFound as exc:
            return _single_error(
                "client_error", "not_found", str(exc), status.HTTP_404_NOT_FOUND
            )
        return Response(outcome.model_dump(mode="json"))
