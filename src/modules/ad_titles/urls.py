"""Ad title URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.ad_titles.views import AdTitleViewSet

router = DefaultRouter(trailing_slash=True)
router.register("ad-titles", AdTitleViewSet, basename="ad-title")

urlpatterns = router.urls
