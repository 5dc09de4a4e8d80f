"""Root URL configuration for the PR reviewer service."""

from django.urls import include, path

urlpatterns = [
    path("", include("reviews.urls")),
]
