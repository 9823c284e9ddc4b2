from django.contrib import admin
from .models import RFIDScan


@admin.register(RFIDScan)
class RFIDScanAdmin(admin.ModelAdmin):
    list_display = ['tag_id_hex', 'cattle', 'gaushala', 'scan_location', 'scan_timestamp', 'scanner_device_id']
    list_filter = ['gaushala', 'scan_timestamp']
    search_fields = ['tag_id_hex', 'cattle__name', 'cattle__unique_animal_id', 'scanner_device_id']
    ordering = ['-scan_timestamp']
    raw_id_fields = ['cattle']
