from django.apps import AppConfig


class CommonConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.common"

    def ready(self):
        # registers the post_migrate role-group provisioning
        import apps.common.permissions  # noqa
