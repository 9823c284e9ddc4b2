from django.urls import path
from .views import (
    rfid_scan_list_create, rfid_scan_detail, rfid_scans_by_tag, rfid_latest_scan,
    rfid_scan_count, rfid_scans_by_date_range, rfid_scan_stats,
)

urlpatterns = [
    path('rfid-scans/', rfid_scan_list_create, name='rfid-scan-list-create'),
    path('rfid-scans/<int:pk>/', rfid_scan_detail, name='rfid-scan-detail'),
    path('rfid-scans/tag/<str:tag>/', rfid_scans_by_tag, name='rfid-scans-by-tag'),
    path('rfid-scans/tag/<str:tag>/latest/', rfid_latest_scan, name='rfid-latest-scan'),
    path('rfid-scans/tag/<str:tag>/count/', rfid_scan_count, name='rfid-scan-count'),
    path('rfid-scans/range/', rfid_scans_by_date_range, name='rfid-scans-by-date-range'),
    path('rfid-scans/stats/', rfid_scan_stats, name='rfid-scan-stats'),
]
