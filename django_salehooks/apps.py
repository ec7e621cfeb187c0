from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class SaleHooksAppConfig(AppConfig):
    default = True
    default_auto_field = "django.db.models.BigAutoField"
    name = "django_salehooks"
    verbose_name = _("Sale Webhooks")
