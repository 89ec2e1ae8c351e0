"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Domain exceptions propagate to ``api_exception_handler``, which renders
the error envelope; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.ad_titles.repositories import AdTitleDjangoRepository
from modules.core.authentication import get_owner_id
from modules.core.exceptions import InvalidInput
from modules.products.dtos import ChangeStatusDTO, UpsertProductDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories import ProductDjangoRepository
from modules.products.serializers import HealthIssueSerializer, ProductSerializer
from modules.products.services import ProductService


class ProductViewSet(ListModelMixin, GenericViewSet):
    """Catalog endpoints for the authenticated seller.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all writes go through the
    service/repository layer.
    """

    filterset_class = ProductFilter
    search_fields = ["product_name", "sku", "brand", "description"]
    ordering_fields = ["product_name", "sku", "status", "created_at", "updated_at"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.none()
    serializer_class = ProductSerializer
    throttle_scope = "catalog_write"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            ad_title_repository=AdTitleDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve / Destroy
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_products(get_owner_id(self.request.user)).prefetch_related(
            "variants"
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_product(pk, get_owner_id(request.user))
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/ (archives the product)."""
        self._service.archive_product(pk, get_owner_id(request.user))
        return Response({"ok": True})

    # ------------------------------------------------------------------
    # Upsert / Status
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"], url_path="upsert")
    def upsert(self, request: Request) -> Response:
        """POST /api/v1/products/upsert/

        Body: ``{"product": {...}, "mode": "create"|"edit", "variants": [...]}``
        """
        data = request.data if isinstance(request.data, dict) else {}
        if not isinstance(data.get("product"), dict):
            raise InvalidInput("Campo 'product' é obrigatório")

        dto = UpsertProductDTO.model_validate(dict(data))
        outcome = self._service.upsert_product(dto, get_owner_id(request.user))
        return Response(
            {
                "ok": True,
                "productId": str(outcome.product.id),
                "message": outcome.message,
            },
            status=status.HTTP_201_CREATED if outcome.created else status.HTTP_200_OK,
        )

    @action(detail=False, methods=["post"], url_path="change-status")
    def change_status(self, request: Request) -> Response:
        """POST /api/v1/products/change-status/"""
        data = request.data if isinstance(request.data, dict) else {}
        dto = ChangeStatusDTO(
            product_id=data.get("product_id"),
            status=data.get("status"),
        )
        product = self._service.change_status(dto, get_owner_id(request.user))
        return Response(
            {"ok": True, "productId": str(product.id), "status": product.status}
        )

    @action(detail=False, methods=["get"], url_path="health")
    def health(self, request: Request) -> Response:
        """GET /api/v1/products/health/?product_id="""
        product_id = (request.query_params.get("product_id") or "").strip()
        if not product_id:
            raise InvalidInput("Parâmetro 'product_id' é obrigatório")

        product, report = self._service.get_health(product_id, get_owner_id(request.user))
        return Response(
            {
                "ok": True,
                "productId": str(product.id),
                "status": product.status,
                "readyToPublish": report.ready_to_publish,
                "blocking": HealthIssueSerializer(report.blocking, many=True).data,
                "warnings": HealthIssueSerializer(report.warnings, many=True).data,
                "meta": report.meta(),
            }
        )
