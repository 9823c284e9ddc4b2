from django.urls import path
from .views import (
    medicine_list_create, medicine_detail, medicine_search, medicine_expired, medicine_low_stock
)

urlpatterns = [
    path('medicines/', medicine_list_create, name='medicine-list-create'),
    path('medicines/<int:pk>/', medicine_detail, name='medicine-detail'),
    path('medicines/search/', medicine_search, name='medicine-search'),
    path('medicines/expired/', medicine_expired, name='medicine-expired'),
    path('medicines/low-stock/', medicine_low_stock, name='medicine-low-stock'),
]
