from django.contrib import admin
from .models import Breed, Species, Gender, Color, Cattle, HealthRecord


@admin.register(Breed)
class BreedAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Species)
class SpeciesAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Gender)
class GenderAdmin(admin.ModelAdmin):
    list_display = ['name']


@admin.register(Color)
class ColorAdmin(admin.ModelAdmin):
    list_display = ['name', 'hex_code']
    search_fields = ['name']


class HealthRecordInline(admin.TabularInline):
    model = HealthRecord
    extra = 0
    fields = ['record_type', 'record_date', 'veterinarian_name', 'next_vaccination_date', 'next_checkup_date']


@admin.register(Cattle)
class CattleAdmin(admin.ModelAdmin):
    list_display = ['unique_animal_id', 'name', 'gaushala', 'breed', 'shed', 'milking_status', 'is_active']
    list_filter = ['is_active', 'gaushala', 'breed', 'milking_status', 'pregnancy_status']
    search_fields = ['unique_animal_id', 'name', 'ear_tag_no', 'rfid_tag_no', 'microchip_no']
    ordering = ['unique_animal_id']
    inlines = [HealthRecordInline]


@admin.register(HealthRecord)
class HealthRecordAdmin(admin.ModelAdmin):
    list_display = ['cattle', 'record_type', 'record_date', 'veterinarian_name', 'next_vaccination_date', 'next_checkup_date']
    list_filter = ['record_type', 'record_date', 'gaushala']
    search_fields = ['cattle__name', 'cattle__unique_animal_id', 'veterinarian_name', 'diagnosis']
    ordering = ['-record_date']
