from django.apps import AppConfig


class InvoicesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.invoices"
    label = "invoices"

    def ready(self) -> None:
        from modules.invoices.handlers import order_confirmed_handler
        from modules.orders.events import OrderConfirmed
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderConfirmed, order_confirmed_handler)
