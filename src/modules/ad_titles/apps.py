from django.apps import AppConfig


class AdTitlesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.ad_titles"
    label = "ad_titles"
