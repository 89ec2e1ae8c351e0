"""Explicit service configuration.

Domain services receive a ``ServiceSettings`` value through their
constructor instead of reading ``django.conf.settings`` deep inside
business logic.  Views build it once per request from the Django
settings loaded at process start.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True)
class ServiceSettings:
    job_secret: str = ""
    stock_check_batch_size: int = 100
    expose_error_details: bool = False
    max_ad_titles_per_product: int = 10
    max_preference_key_length: int = 100


def get_service_settings() -> ServiceSettings:
    return ServiceSettings(
        job_secret=getattr(settings, "JOB_SECRET", ""),
        stock_check_batch_size=getattr(settings, "STOCK_CHECK_BATCH_SIZE", 100),
        expose_error_details=getattr(settings, "EXPOSE_ERROR_DETAILS", False),
        max_ad_titles_per_product=getattr(settings, "MAX_AD_TITLES_PER_PRODUCT", 10),
        max_preference_key_length=getattr(settings, "MAX_PREFERENCE_KEY_LENGTH", 100),
    )
