"""Ad title repositories package."""

from modules.ad_titles.repositories.django_repository import AdTitleDjangoRepository
from modules.ad_titles.repositories.interfaces import IAdTitleRepository

__all__ = ["AdTitleDjangoRepository", "IAdTitleRepository"]
