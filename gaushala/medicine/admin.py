from django.contrib import admin
from .models import Medicine


@admin.register(Medicine)
class MedicineAdmin(admin.ModelAdmin):
    list_display = ['name', 'gaushala', 'dosage', 'quantity', 'unit', 'expiry_date', 'batch_number']
    list_filter = ['gaushala', 'expiry_date']
    search_fields = ['name', 'batch_number', 'manufacturer']
    ordering = ['name']
