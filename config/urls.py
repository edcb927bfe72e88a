"""URL configuration for the workshop booking project.

The `urlpatterns` list routes URLs to views. It includes both Django admin
and the application-level API routes provided by each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    # Application URLs
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/availability/', include('apps.availability.urls')),
    path('api/v1/admin/', include('apps.availability.admin_urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/customers/', include('apps.customers.urls')),
    # OpenAPI schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
