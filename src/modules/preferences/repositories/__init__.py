"""Preference repositories package."""

from modules.preferences.repositories.django_repository import PreferenceDjangoRepository
from modules.preferences.repositories.interfaces import IPreferenceRepository

__all__ = ["IPreferenceRepository", "PreferenceDjangoRepository"]
