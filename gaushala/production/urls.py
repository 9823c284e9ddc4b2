from django.urls import path
from .views import (
    milk_record_list_create, milk_record_detail, milk_records_by_shed,
    milk_records_by_date_range, milk_total_quantity, milk_stats,
    milk_table_layout, milk_table_toggle_column, milk_table_reset,
    milk_table_reorder, milk_table_toggle_sort, milk_table_clear_sort,
)

urlpatterns = [
    path('milk-records/', milk_record_list_create, name='milk-record-list-create'),
    path('milk-records/<int:pk>/', milk_record_detail, name='milk-record-detail'),
    path('milk-records/shed/<str:shed_number>/', milk_records_by_shed, name='milk-records-by-shed'),
    path('milk-records/range/', milk_records_by_date_range, name='milk-records-by-date-range'),
    path('milk-records/total-quantity/', milk_total_quantity, name='milk-total-quantity'),
    path('milk-records/stats/', milk_stats, name='milk-stats'),
    # Table layout
    path('milk-records/layout/', milk_table_layout, name='milk-table-layout'),
    path('milk-records/layout/visibility/', milk_table_toggle_column, name='milk-table-toggle-column'),
    path('milk-records/layout/reset/', milk_table_reset, name='milk-table-reset'),
    path('milk-records/layout/reorder/', milk_table_reorder, name='milk-table-reorder'),
    path('milk-records/layout/sort/', milk_table_toggle_sort, name='milk-table-toggle-sort'),
    path('milk-records/layout/sort/clear/', milk_table_clear_sort, name='milk-table-clear-sort'),
]
