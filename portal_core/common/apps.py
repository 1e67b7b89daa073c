from django.apps import AppConfig


class CommonConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "portal_core.common"

    def ready(self) -> None:
        from django.db.backends.signals import connection_created

        from portal_core.common.db import register_sqlite_functions

        connection_created.connect(
            register_sqlite_functions,
            dispatch_uid="common.register_sqlite_functions",
        )
