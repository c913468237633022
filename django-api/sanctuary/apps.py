from django.apps import AppConfig


class SanctuaryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sanctuary"
    verbose_name = "Sanctuary"

    def ready(self) -> None:
        from sanctuary import signals  # noqa: F401
        from sanctuary.container import build_services
        from sanctuary.services import RateLimiter
        from sanctuary.stores.django_store import DjangoDocumentStore

        self.services = build_services(DjangoDocumentStore(), rate_limiter=RateLimiter())
