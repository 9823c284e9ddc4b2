from django.db import models
from decimal import Decimal
from gaushala.locations.models import Gaushala


class Medicine(models.Model):
    """Medicine stock held by a gaushala"""
    gaushala = models.ForeignKey(Gaushala, on_delete=models.CASCADE, related_name='medicines')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    dosage = models.CharField(max_length=100)
    unit = models.CharField(max_length=50)
    quantity = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    expiry_date = models.DateTimeField()
    manufacturer = models.CharField(max_length=200, blank=True)
    batch_number = models.CharField(max_length=100, blank=True)
    purpose = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.batch_number})" if self.batch_number else self.name

    class Meta:
        db_table = 'medicines'
        ordering = ['name']
        indexes = [
            models.Index(fields=['expiry_date'], name='idx_medicine_expiry'),
        ]
