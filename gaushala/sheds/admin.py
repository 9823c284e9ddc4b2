from django.contrib import admin
from .models import Shed


@admin.register(Shed)
class ShedAdmin(admin.ModelAdmin):
    list_display = ['shed_number', 'shed_name', 'gaushala', 'shed_type', 'capacity', 'status']
    list_filter = ['status', 'shed_type', 'gaushala']
    search_fields = ['shed_number', 'shed_name']
    ordering = ['gaushala', 'shed_number']
