"""
App settings, read from SALEHOOKS_* entries in the Django settings module.
"""
from django.conf import settings as dj_settings
from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.utils.module_loading import import_string

PREFIX = "SALEHOOKS_"

DEFAULTS = {
    "TENANT_RESOLVER": "django_salehooks.tenants.OrganizationResolver",
    "PUSH_TRANSPORT": "django_salehooks.push.FirebasePushTransport",
    "FIREBASE_CREDENTIALS": None,
    "DEFAULT_CURRENCY": "BRL",
    "DEFAULT_LOCALE": "pt_BR",
    "PUSH_LINK": "/vendas",
    "PUSH_ICON": "/icon-192x192.png",
    "HISTORY_LIMIT": None,
}

# Settings holding a class, given either as the object or as a dotted path
IMPORT_SETTINGS = ("TENANT_RESOLVER", "PUSH_TRANSPORT")


def is_class(value):
    return isinstance(value, type)


def get_class(value, setting):
    if is_class(value):
        return value

    if isinstance(value, str):
        try:
            return import_string(value)
        except ImportError as e:
            raise ImproperlyConfigured(
                f"{PREFIX}{setting} could not import '{value}': {e}"
            ) from e

    raise ImproperlyConfigured(f"{PREFIX}{setting} must be a class or dotted path.")


class Settings:
    def __getattr__(self, name):
        if name not in DEFAULTS:
            msg = "'%s' object has no attribute '%s'"
            raise AttributeError(msg % (self.__class__.__name__, name))

        value = self.get_setting(name)

        # Cache the result
        setattr(self, name, value)
        return value

    def get_setting(self, setting):
        value = getattr(dj_settings, PREFIX + setting, DEFAULTS[setting])

        if setting in IMPORT_SETTINGS:
            return get_class(value, setting)

        return value

    def change_setting(self, setting, value, enter, **kwargs):
        if not setting.startswith(PREFIX):
            return

        name = setting[len(PREFIX) :]
        if name in DEFAULTS:
            # recomputed on next access, on enter and on exit alike
            self.__dict__.pop(name, None)


settings = Settings()
setting_changed.connect(settings.change_setting)
