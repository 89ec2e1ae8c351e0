"""Ad title API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.ad_titles.dtos import CreateAdTitleDTO, UpdateAdTitleDTO
from modules.ad_titles.repositories import AdTitleDjangoRepository
from modules.ad_titles.serializers import AdTitleSerializer
from modules.ad_titles.services import AdTitleService
from modules.core.authentication import get_owner_id
from modules.core.conf import get_service_settings
from modules.core.exceptions import InvalidInput
from modules.products.repositories import ProductDjangoRepository


class AdTitleViewSet(ViewSet):
    """``/api/v1/ad-titles/``: list, create, partial update and delete."""

    throttle_scope = "catalog_write"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AdTitleService(
            repository=AdTitleDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            settings=get_service_settings(),
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/ad-titles/?product_id="""
        product_id = (request.query_params.get("product_id") or "").strip()
        if not product_id:
            raise InvalidInput("Parâmetro 'product_id' é obrigatório")
        titles = self._service.list_titles(product_id, get_owner_id(request.user))
        return Response({"ok": True, "titles": AdTitleSerializer(titles, many=True).data})

    def create(self, request: Request) -> Response:
        """POST /api/v1/ad-titles/"""
        data = request.data if isinstance(request.data, dict) else {}
        dto = CreateAdTitleDTO(product_id=data.get("product_id"), title=data.get("title"))
        ad_title = self._service.create_title(dto, get_owner_id(request.user))
        return Response(
            {"ok": True, "title": AdTitleSerializer(ad_title).data},
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/ad-titles/{pk}/"""
        data = request.data if isinstance(request.data, dict) else {}
        dto = UpdateAdTitleDTO(title=data.get("title"), is_active=data.get("is_active"))
        ad_title = self._service.update_title(pk, dto, get_owner_id(request.user))
        return Response({"ok": True, "title": AdTitleSerializer(ad_title).data})

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/ad-titles/{pk}/"""
        self._service.delete_title(pk, get_owner_id(request.user))
        return Response({"ok": True})
