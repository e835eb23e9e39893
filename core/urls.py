"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("api/charts/ec10eq/<str:cas>/", views.ec10eq_chart_api, name="ec10eq_chart_api"),
    path("api/charts/ssd/<str:cas>/", views.ssd_chart_api, name="ssd_chart_api"),
    path("api/charts/comparison/", views.comparison_chart_api, name="comparison_chart_api"),
    path("api/substances/", views.substance_search_api, name="substance_search_api"),
]
