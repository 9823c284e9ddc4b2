from django.contrib import admin
from .models import Gaushala, Location


@admin.register(Gaushala)
class GaushalaAdmin(admin.ModelAdmin):
    list_display = ['name', 'registration_number', 'city', 'state', 'is_active', 'created_at']
    list_filter = ['is_active', 'state', 'created_at']
    search_fields = ['name', 'registration_number', 'city']
    ordering = ['name']


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['name', 'city', 'state', 'contact_person', 'contact_phone']
    search_fields = ['name', 'city', 'contact_person']
    ordering = ['name']
