from django.conf import settings
from django.db import models
from gaushala.locations.models import Gaushala
from gaushala.herd.models import Cattle


class MilkRecord(models.Model):
    """Milk collected from a shed or a single animal"""
    ENTRY_TYPE_CHOICES = [
        ('SHED', 'Shed'),
        ('CATTLE', 'Cattle'),
    ]

    SESSION_CHOICES = [
        ('MORNING', 'Morning'),
        ('EVENING', 'Evening'),
        ('FULL_DAY', 'Full Day'),
    ]

    STATUS_CHOICES = [
        ('EXCELLENT', 'Excellent'),
        ('GOOD', 'Good'),
        ('AVERAGE', 'Average'),
        ('POOR', 'Poor'),
    ]

    gaushala = models.ForeignKey(Gaushala, on_delete=models.CASCADE, related_name='milk_records')
    entry_type = models.CharField(max_length=10, choices=ENTRY_TYPE_CHOICES, default='SHED')
    cattle = models.ForeignKey(Cattle, on_delete=models.SET_NULL, null=True, blank=True, related_name='milk_records')
    shed_number = models.CharField(max_length=50)
    record_date = models.DateField()
    session = models.CharField(max_length=10, choices=SESSION_CHOICES, default='FULL_DAY')
    milk_quantity = models.DecimalField(max_digits=10, decimal_places=2)
    fat_percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    snf = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='milk_records_created')
    updated_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='milk_records_updated')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.shed_number} {self.record_date} {self.milk_quantity}L"

    class Meta:
        db_table = 'milk_records'
        ordering = ['-record_date', '-id']
        indexes = [
            models.Index(fields=['gaushala', 'record_date'], name='idx_milk_gaushala_date'),
            models.Index(fields=['shed_number', 'record_date'], name='idx_milk_shed_date'),
        ]


class TableLayout(models.Model):
    """
    Saved column layout and sort order of a data table, per user.

    ``version`` tags the layout schema; a stored layout with a different
    version is discarded and replaced with the defaults on load.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='table_layouts')
    table_key = models.CharField(max_length=100)
    version = models.CharField(max_length=20)
    columns = models.JSONField(default=list, blank=True)
    sort_spec = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} - {self.table_key} v{self.version}"

    class Meta:
        db_table = 'table_layouts'
        unique_together = [['user', 'table_key']]
