"""Preference URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.preferences.views import PreferenceResetView, PreferenceView

urlpatterns = [
    path("preferences/", PreferenceView.as_view(), name="preferences"),
    path("preferences/reset/", PreferenceResetView.as_view(), name="preferences-reset"),
]
