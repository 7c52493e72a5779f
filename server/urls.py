"""Root URL configuration."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path(
        'campaign-application/',
        include('server.apps.campaign_applications.urls'),
    ),
]
