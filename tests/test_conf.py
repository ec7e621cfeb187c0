import pytest
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from django_salehooks.conf import DEFAULTS, settings
from django_salehooks.tenants import OrganizationResolver
from tests.apps.testapp.push import FakePushTransport


def test_defaults():
    assert settings.DEFAULT_CURRENCY == "BRL"
    assert settings.DEFAULT_LOCALE == "pt_BR"
    assert settings.PUSH_LINK == "/vendas"
    assert settings.HISTORY_LIMIT is None
    assert settings.TENANT_RESOLVER is OrganizationResolver


def test_project_setting_overrides_default():
    assert settings.PUSH_TRANSPORT is FakePushTransport


def test_override_settings_clears_cached_value():
    assert settings.DEFAULT_CURRENCY == "BRL"

    with override_settings(SALEHOOKS_DEFAULT_CURRENCY="USD"):
        assert settings.DEFAULT_CURRENCY == "USD"

    assert settings.DEFAULT_CURRENCY == "BRL"


def test_class_setting_accepts_class_object():
    with override_settings(SALEHOOKS_TENANT_RESOLVER=OrganizationResolver):
        assert settings.TENANT_RESOLVER is OrganizationResolver


def test_invalid_import_path():
    with override_settings(SALEHOOKS_TENANT_RESOLVER="does.not.Exist"):
        with pytest.raises(ImproperlyConfigured, match="SALEHOOKS_TENANT_RESOLVER"):
            settings.TENANT_RESOLVER


def test_invalid_class_setting_type():
    with override_settings(SALEHOOKS_PUSH_TRANSPORT=42):
        with pytest.raises(ImproperlyConfigured, match="class or dotted path"):
            settings.PUSH_TRANSPORT


def test_unknown_setting():
    assert "NOT_A_SETTING" not in DEFAULTS
    with pytest.raises(AttributeError):
        settings.NOT_A_SETTING
