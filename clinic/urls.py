"""
URL configuration for the clinic project.

API routes live in :mod:`records.routers`.  OpenAPI documentation is
exposed at ``/swagger/`` and ``/redoc/`` and Prometheus metrics at
``/metrics``.  Anything else falls through to the browser client.
"""
from django.urls import path, include, re_path

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

from records.views.frontend import index

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Clinic Records API",
    default_version='v1',
    description="Doctor and patient records with real-time notifications.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('', include('records.routers')),
    # Swagger and ReDoc
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
    # Browser client catch-all; must stay last
    re_path(r'^(?!api/|ws/|static/).*$', index, name='frontend_index'),
]
