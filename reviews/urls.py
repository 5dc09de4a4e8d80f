"""URL routes for the reviews app."""

from django.urls import path

from . import views

app_name = "reviews"

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
    path("team/add", views.team_add, name="team_add"),
    path("team/get", views.team_get, name="team_get"),
    path("users/setIsActive", views.users_set_is_active, name="users_set_is_active"),
    path("users/getReview", views.users_get_review, name="users_get_review"),
    path("pullRequest/create", views.pull_request_create, name="pull_request_create"),
    path("pullRequest/merge", views.pull_request_merge, name="pull_request_merge"),
    path("pullRequest/reassign", views.pull_request_reassign, name="pull_request_reassign"),
]
