"""
Entity IDs Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("entities", views.entities_list_view),
    path("entities/display-format/validate", views.display_format_validate_view),
    path("entities/display-format/preview", views.display_format_preview_view),
    path("entities/<uuid:entity_id>/display-format", views.display_format_view),
]
