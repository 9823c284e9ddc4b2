from django.urls import path
from .views import (
    shed_list_create, shed_detail, sheds_by_gaushala, sheds_by_status,
    gaushala_available_capacity, sheds_available_for_cattle, shed_capacity_dashboard,
)

urlpatterns = [
    path('sheds/', shed_list_create, name='shed-list-create'),
    path('sheds/<int:pk>/', shed_detail, name='shed-detail'),
    path('sheds/gaushala/<int:gaushala_id>/', sheds_by_gaushala, name='sheds-by-gaushala'),
    path('sheds/gaushala/<int:gaushala_id>/available-capacity/', gaushala_available_capacity, name='gaushala-available-capacity'),
    path('sheds/status/<str:shed_status>/', sheds_by_status, name='sheds-by-status'),
    path('sheds/available/', sheds_available_for_cattle, name='sheds-available-for-cattle'),
    path('sheds/capacity-dashboard/', shed_capacity_dashboard, name='shed-capacity-dashboard'),
]
