import django_filters
from django.db.models import Q
from .models import Cattle, HealthRecord


class CattleFilter(django_filters.FilterSet):
    """Filters for the cattle registry list"""

    search = django_filters.CharFilter(method='filter_search', label='Search')
    gaushala = django_filters.NumberFilter(field_name='gaushala_id', lookup_expr='exact')
    shed = django_filters.NumberFilter(field_name='shed_id', lookup_expr='exact')
    shed_number = django_filters.CharFilter(field_name='shed__shed_number', lookup_expr='iexact')
    breed = django_filters.NumberFilter(field_name='breed_id', lookup_expr='exact')
    species = django_filters.NumberFilter(field_name='species_id', lookup_expr='exact')
    gender = django_filters.NumberFilter(field_name='gender_id', lookup_expr='exact')
    milking_status = django_filters.CharFilter(field_name='milking_status', lookup_expr='iexact')
    pregnancy_status = django_filters.CharFilter(field_name='pregnancy_status', lookup_expr='iexact')
    is_active = django_filters.CharFilter(method='filter_active', label='Active')

    class Meta:
        model = Cattle
        fields = ['search', 'gaushala', 'shed', 'shed_number', 'breed', 'species', 'gender',
                  'milking_status', 'pregnancy_status', 'is_active']

    def filter_search(self, queryset, name, value):
        """Match name, animal id, ear tag, RFID tag or microchip number"""
        search = value.strip() if value else ''
        if not search:
            return queryset
        return queryset.filter(
            Q(name__icontains=search) |
            Q(unique_animal_id__icontains=search) |
            Q(ear_tag_no__icontains=search) |
            Q(rfid_tag_no__icontains=search) |
            Q(microchip_no__icontains=search)
        )

    def filter_active(self, queryset, name, value):
        """Filter by active status (handles string 'true'/'false')"""
        if value is None or value == '':
            return queryset
        return queryset.filter(is_active=value.lower() in ('true', '1', 'yes'))


class HealthRecordFilter(django_filters.FilterSet):
    cattle = django_filters.NumberFilter(field_name='cattle_id', lookup_expr='exact')
    gaushala = django_filters.NumberFilter(field_name='gaushala_id', lookup_expr='exact')
    record_type = django_filters.CharFilter(field_name='record_type', lookup_expr='iexact')
    start_date = django_filters.DateFilter(field_name='record_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='record_date', lookup_expr='lte')

    class Meta:
        model = HealthRecord
        fields = ['cattle', 'gaushala', 'record_type', 'start_date', 'end_date']
