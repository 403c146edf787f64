"""
URL configuration for wv_config project.

Routes everything under /api/ to the schematic app.
"""
from django.urls import path, include

urlpatterns = [
    path('api/', include('apps.schematic.urls')),
]
