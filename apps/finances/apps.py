from django.apps import AppConfig


class FinancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.finances"
    label = "finances"

    def ready(self) -> None:  # pragma: no cover - import side effects
        from .event_handlers import register_handlers

        register_handlers()
