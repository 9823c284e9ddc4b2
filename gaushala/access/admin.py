from django.contrib import admin
from .models import UserGaushalaAccess


@admin.register(UserGaushalaAccess)
class UserGaushalaAccessAdmin(admin.ModelAdmin):
    list_display = ['user', 'gaushala', 'granted_by', 'granted_at']
    list_filter = ['gaushala']
    search_fields = ['user__username', 'gaushala__name']
    readonly_fields = ['granted_at']
