from django.contrib import admin
from .models import MilkRecord, TableLayout


@admin.register(MilkRecord)
class MilkRecordAdmin(admin.ModelAdmin):
    list_display = ['record_date', 'shed_number', 'session', 'milk_quantity', 'fat_percentage', 'snf', 'status', 'gaushala']
    list_filter = ['status', 'session', 'entry_type', 'gaushala', 'record_date']
    search_fields = ['shed_number', 'notes', 'cattle__name', 'cattle__unique_animal_id']
    ordering = ['-record_date', '-id']
    raw_id_fields = ['cattle', 'created_by', 'updated_by']


@admin.register(TableLayout)
class TableLayoutAdmin(admin.ModelAdmin):
    list_display = ['user', 'table_key', 'version', 'updated_at']
    list_filter = ['table_key', 'version']
    search_fields = ['user__username', 'table_key']
