from django.db import models
from gaushala.locations.models import Gaushala
from gaushala.herd.models import Cattle


class RFIDScan(models.Model):
    """A single tag read from an RFID scanner"""
    tag_id_hex = models.CharField(max_length=64, db_index=True)
    cattle = models.ForeignKey(Cattle, on_delete=models.SET_NULL, null=True, blank=True, related_name='rfid_scans')
    gaushala = models.ForeignKey(Gaushala, on_delete=models.CASCADE, related_name='rfid_scans')
    scan_location = models.CharField(max_length=200, blank=True)
    scan_timestamp = models.DateTimeField()
    scanner_device_id = models.CharField(max_length=100, blank=True)
    signal_strength = models.IntegerField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.tag_id_hex} @ {self.scan_timestamp}"

    def save(self, *args, **kwargs):
        self.tag_id_hex = (self.tag_id_hex or '').strip().upper()
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'rfid_scans'
        ordering = ['-scan_timestamp', '-id']
        indexes = [
            models.Index(fields=['tag_id_hex', '-scan_timestamp'], name='idx_rfid_tag_time'),
            models.Index(fields=['gaushala', 'scan_timestamp'], name='idx_rfid_gaushala_time'),
        ]
