from django.urls import path

from django_salehooks import views
from django_salehooks.gateways import available_gateways

app_name = "django_salehooks"

urlpatterns = [
    path(
        "webhooks/<str:gateway>/<str:org_secret>/",
        views.webhook,
        name="webhook",
    ),
] + [
    path(
        f"webhook/{slug}/",
        views.gateway_webhook,
        {"gateway": slug},
        name=f"webhook-{slug}",
    )
    for slug in available_gateways()
]
