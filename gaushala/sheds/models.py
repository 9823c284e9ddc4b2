from django.db import models
from gaushala.locations.models import Gaushala

# Utilisation thresholds used by the capacity dashboard
OVERCROWDED_PERCENTAGE = 90
WARNING_PERCENTAGE = 70


class Shed(models.Model):
    """Cattle sheds within a gaushala"""
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('MAINTENANCE', 'Under Maintenance'),
        ('INACTIVE', 'Inactive'),
    ]

    SHED_TYPE_CHOICES = [
        ('MILKING', 'Milking'),
        ('DRY', 'Dry Cattle'),
        ('CALF', 'Calf'),
        ('BULL', 'Bull'),
        ('QUARANTINE', 'Quarantine'),
        ('GENERAL', 'General'),
    ]

    gaushala = models.ForeignKey(Gaushala, on_delete=models.CASCADE, related_name='sheds')
    shed_name = models.CharField(max_length=200)
    shed_number = models.CharField(max_length=50)
    capacity = models.PositiveIntegerField()
    shed_type = models.CharField(max_length=20, choices=SHED_TYPE_CHOICES, default='GENERAL')
    area_sq_ft = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    ventilation_type = models.CharField(max_length=100, blank=True)
    flooring_type = models.CharField(max_length=100, blank=True)
    water_facility = models.BooleanField(default=True)
    feeding_facility = models.BooleanField(default=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.shed_number} - {self.shed_name}"

    @property
    def current_occupancy(self):
        """Active cattle housed here; uses the list annotation when present"""
        annotated = getattr(self, 'occupancy', None)
        if annotated is not None:
            return annotated
        return self.cattle.filter(is_active=True).count()

    @property
    def available_space(self):
        return max(self.capacity - self.current_occupancy, 0)

    @property
    def occupancy_ratio(self):
        """Unrounded percentage used for capacity thresholds"""
        if not self.capacity:
            return 0.0
        return self.current_occupancy * 100.0 / self.capacity

    @property
    def occupancy_percentage(self):
        return round(self.occupancy_ratio, 1)

    def has_space(self):
        return self.status == 'ACTIVE' and self.current_occupancy < self.capacity

    class Meta:
        db_table = 'sheds'
        ordering = ['shed_number']
        unique_together = [['gaushala', 'shed_number']]
        indexes = [
            models.Index(fields=['gaushala', 'status'], name='idx_shed_gaushala_status'),
        ]
