from django.urls import path

from .api.views import HealthView

app_name = "core"

urlpatterns = [
    path("", HealthView.as_view(), name="health"),
]
