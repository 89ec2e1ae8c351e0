"""Notification URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.notifications.views import MarkReadView, NotificationListView, StockCheckJobView

urlpatterns = [
    path("jobs/stock-min-check/", StockCheckJobView.as_view(), name="stock-min-check"),
    path("notifications/", NotificationListView.as_view(), name="notification-list"),
    path("notifications/mark-read/", MarkReadView.as_view(), name="notification-mark-read"),
]
