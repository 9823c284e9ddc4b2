import django_filters
from .models import MilkRecord


class MilkRecordFilter(django_filters.FilterSet):
    """Query-param filters for the milk record list"""

    gaushala = django_filters.NumberFilter(field_name='gaushala_id', lookup_expr='exact')
    shed_number = django_filters.CharFilter(field_name='shed_number', lookup_expr='iexact')
    status = django_filters.CharFilter(method='filter_status', label='Status')
    session = django_filters.CharFilter(field_name='session', lookup_expr='iexact')
    entry_type = django_filters.CharFilter(field_name='entry_type', lookup_expr='iexact')
    cattle = django_filters.NumberFilter(field_name='cattle_id', lookup_expr='exact')
    start_date = django_filters.DateFilter(field_name='record_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='record_date', lookup_expr='lte')

    class Meta:
        model = MilkRecord
        fields = ['gaushala', 'shed_number', 'status', 'session', 'entry_type', 'cattle', 'start_date', 'end_date']

    def filter_status(self, queryset, name, value):
        """Accepts a single status or a comma separated list"""
        if not value:
            return queryset
        statuses = [s.strip().upper() for s in value.split(',') if s.strip()]
        return queryset.filter(status__in=statuses)
