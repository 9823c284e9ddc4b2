from django.urls import path
from .views import (
    breed_list_create, breed_detail, species_list_create, species_detail,
    gender_list_create, gender_detail, color_list_create, color_detail,
    cattle_list_create, cattle_detail, cattle_by_rfid, cattle_by_shed,
    health_record_list_create, health_record_detail, health_records_by_cattle,
    pending_vaccinations, upcoming_checkups, health_records_by_date_range,
)

urlpatterns = [
    # Master data
    path('breeds/', breed_list_create, name='breed-list-create'),
    path('breeds/<int:pk>/', breed_detail, name='breed-detail'),
    path('species/', species_list_create, name='species-list-create'),
    path('species/<int:pk>/', species_detail, name='species-detail'),
    path('genders/', gender_list_create, name='gender-list-create'),
    path('genders/<int:pk>/', gender_detail, name='gender-detail'),
    path('colors/', color_list_create, name='color-list-create'),
    path('colors/<int:pk>/', color_detail, name='color-detail'),
    # Cattle
    path('cattle/', cattle_list_create, name='cattle-list-create'),
    path('cattle/<int:pk>/', cattle_detail, name='cattle-detail'),
    path('cattle/rfid/<str:tag>/', cattle_by_rfid, name='cattle-by-rfid'),
    path('cattle/shed/<str:shed_number>/', cattle_by_shed, name='cattle-by-shed'),
    path('cattle/<int:cattle_id>/health-records/', health_records_by_cattle, name='health-records-by-cattle'),
    # Health records
    path('health-records/', health_record_list_create, name='health-record-list-create'),
    path('health-records/<int:pk>/', health_record_detail, name='health-record-detail'),
    path('health-records/pending-vaccinations/', pending_vaccinations, name='pending-vaccinations'),
    path('health-records/upcoming-checkups/', upcoming_checkups, name='upcoming-checkups'),
    path('health-records/range/', health_records_by_date_range, name='health-records-by-date-range'),
]
