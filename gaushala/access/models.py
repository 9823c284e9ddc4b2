from django.conf import settings
from django.db import models
from gaushala.locations.models import Gaushala


class UserGaushalaAccess(models.Model):
    """Grants a non-admin user access to one gaushala's records"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='gaushala_access')
    gaushala = models.ForeignKey(Gaushala, on_delete=models.CASCADE, related_name='user_access')
    granted_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='granted_gaushala_access')
    granted_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user} -> {self.gaushala}"

    class Meta:
        db_table = 'user_gaushala_access'
        unique_together = [['user', 'gaushala']]
        ordering = ['-granted_at']
