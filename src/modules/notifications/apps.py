from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.notifications"
    label = "notifications"

    def ready(self) -> None:
        from modules.notifications.handlers import product_variants_removed_handler
        from modules.products.events import ProductVariantsRemoved
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(ProductVariantsRemoved, product_variants_removed_handler)
