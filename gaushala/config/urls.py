"""
URL configuration for the GauShala backend.

Every app contributes its endpoints under the shared ``/api/v1/`` prefix.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "GauShala Management Admin Panel"
admin.site.site_title = "GauShala Admin Portal"
admin.site.index_title = "Welcome to the GauShala Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('gaushala.core.urls')),
    path('api/v1/', include('gaushala.locations.urls')),
    path('api/v1/', include('gaushala.herd.urls')),
    path('api/v1/', include('gaushala.sheds.urls')),
    path('api/v1/', include('gaushala.inventory.urls')),
    path('api/v1/', include('gaushala.medicine.urls')),
    path('api/v1/', include('gaushala.production.urls')),
    path('api/v1/', include('gaushala.rfid.urls')),
    path('api/v1/', include('gaushala.access.urls')),
    path('api/v1/', include('gaushala.reports.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
]
