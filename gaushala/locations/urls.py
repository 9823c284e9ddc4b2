from django.urls import path
from .views import (
    gaushala_list_create, gaushala_detail,
    location_list_create, location_detail
)

urlpatterns = [
    path('gaushalas/', gaushala_list_create, name='gaushala-list-create'),
    path('gaushalas/<int:pk>/', gaushala_detail, name='gaushala-detail'),
    path('locations/', location_list_create, name='location-list-create'),
    path('locations/<int:pk>/', location_detail, name='location-detail'),
]
