from django.urls import path
from .views import dashboard_summary, milk_analytics, rfid_analytics

urlpatterns = [
    path('reports/dashboard/', dashboard_summary, name='dashboard-summary'),
    path('reports/milk-analytics/', milk_analytics, name='milk-analytics'),
    path('reports/rfid-analytics/', rfid_analytics, name='rfid-analytics'),
]
