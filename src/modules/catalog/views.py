"""Catalog API views.

Browsing (list, retrieve, categories) is public; product maintenance
requires an administrator JWT.  Domain exceptions are translated into
HTTP responses using the standard error envelope.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
from modules.catalog.exceptions import ProductAlreadyExists, ProductNotFound
from modules.catalog.filters import ProductFilter
from modules.catalog.models import Product
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.catalog.serializers import ProductSerializer
from modules.catalog.services import CatalogService
from modules.core.exceptions import error_response, pydantic_errors

PUBLIC_ACTIONS = {"list", "retrieve"}


def _not_found(exc: Exception) -> Response:
    return error_response(
        "client_error",
        [{"code": "not_found", "detail": str(exc), "attr": None}],
        status.HTTP_404_NOT_FOUND,
    )


class ProductViewSet(ListModelMixin, GenericViewSet):
    """Catalog products.

    The whole live catalog is returned unpaginated; the storefront groups
    it by category client-side.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "category", "strength"]
    ordering_fields = ["name", "category", "stock"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.alive()
    serializer_class = ProductSerializer
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CatalogService(repository=ProductDjangoRepository())

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_throttles(self):
        if self.action in PUBLIC_ACTIONS:
            self.throttle_scope = "catalog_browsing"
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy (admin)
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        try:
            dto = CreateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return error_response(
                "validation_error", pydantic_errors(exc), status.HTTP_400_BAD_REQUEST
            )

        try:
            product = self._service.create_product(dto)
        except ProductAlreadyExists as exc:
            return error_response(
                "client_error",
                [{"code": "conflict", "detail": str(exc), "attr": "id"}],
                status.HTTP_409_CONFLICT,
            )
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/"""
        try:
            dto = UpdateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return error_response(
                "validation_error", pydantic_errors(exc), status.HTTP_400_BAD_REQUEST
            )

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CategoryListView(APIView):
    """GET /api/v1/categories/ - distinct categories of live products."""

    permission_classes = [AllowAny]
    throttle_scope = "catalog_browsing"

    def get(self, request: Request) -> Response:
        service = CatalogService(repository=ProductDjangoRepository())
        return Response(service.list_categories())
