from datetime import date
from django.db import models
from gaushala.locations.models import Gaushala, Location
from gaushala.sheds.models import Shed


class Breed(models.Model):
    """Cattle breeds (Gir, Sahiwal, Tharparkar, ...)"""
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'breeds'
        ordering = ['name']


class Species(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'species'
        ordering = ['name']
        verbose_name_plural = 'species'


class Gender(models.Model):
    name = models.CharField(max_length=50, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'genders'
        ordering = ['name']


class Color(models.Model):
    name = models.CharField(max_length=50, unique=True)
    hex_code = models.CharField(max_length=7, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'colors'
        ordering = ['name']


class Cattle(models.Model):
    """Registered animal in a gaushala"""
    MILKING_STATUS_CHOICES = [
        ('MILKING', 'Milking'),
        ('DRY', 'Dry'),
        ('NOT_APPLICABLE', 'Not Applicable'),
    ]

    PREGNANCY_STATUS_CHOICES = [
        ('PREGNANT', 'Pregnant'),
        ('NOT_PREGNANT', 'Not Pregnant'),
        ('UNKNOWN', 'Unknown'),
    ]

    # Core identity
    unique_animal_id = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    gaushala = models.ForeignKey(Gaushala, on_delete=models.CASCADE, related_name='cattle')

    # Classification
    breed = models.ForeignKey(Breed, on_delete=models.PROTECT, related_name='cattle', null=True, blank=True)
    species = models.ForeignKey(Species, on_delete=models.PROTECT, related_name='cattle', null=True, blank=True)
    gender = models.ForeignKey(Gender, on_delete=models.PROTECT, related_name='cattle', null=True, blank=True)
    color = models.ForeignKey(Color, on_delete=models.PROTECT, related_name='cattle', null=True, blank=True)

    # Physical attributes
    dob = models.DateField(null=True, blank=True)
    weight = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True)
    height = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    horn_status = models.CharField(max_length=50, blank=True)
    disability = models.CharField(max_length=255, blank=True)

    # Identification
    ear_tag_no = models.CharField(max_length=50, blank=True)
    rfid_tag_no = models.CharField(max_length=64, unique=True, null=True, blank=True)
    microchip_no = models.CharField(max_length=64, blank=True)

    # Health management
    vaccination_status = models.CharField(max_length=50, blank=True)
    deworming_schedule = models.CharField(max_length=255, blank=True)
    medical_history = models.TextField(blank=True)
    last_health_checkup_date = models.DateField(null=True, blank=True)
    vet_name = models.CharField(max_length=200, blank=True)
    vet_contact = models.CharField(max_length=20, blank=True)

    # Milk production
    milking_status = models.CharField(max_length=20, choices=MILKING_STATUS_CHOICES, default='NOT_APPLICABLE')
    lactation_number = models.PositiveIntegerField(null=True, blank=True)
    milk_yield_per_day = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    last_calving_date = models.DateField(null=True, blank=True)
    calves_count = models.PositiveIntegerField(default=0)
    pregnancy_status = models.CharField(max_length=20, choices=PREGNANCY_STATUS_CHOICES, default='UNKNOWN')

    # Acquisition
    source = models.ForeignKey(Location, on_delete=models.SET_NULL, null=True, blank=True, related_name='cattle')
    date_of_acquisition = models.DateField(null=True, blank=True)
    previous_owner = models.CharField(max_length=200, blank=True)
    date_of_entry = models.DateField(null=True, blank=True)

    # Housing & feeding
    shed = models.ForeignKey(Shed, on_delete=models.SET_NULL, null=True, blank=True, related_name='cattle')
    feeding_schedule = models.CharField(max_length=255, blank=True)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.unique_animal_id} - {self.name}"

    def save(self, *args, **kwargs):
        if self.rfid_tag_no:
            self.rfid_tag_no = self.rfid_tag_no.strip().upper()
        else:
            # Keep empty tags NULL so the unique constraint ignores them
            self.rfid_tag_no = None
        super().save(*args, **kwargs)

    @property
    def age_years(self):
        """Age in whole years, adjusted if the birthday hasn't occurred this year"""
        if not self.dob:
            return None
        today = date.today()
        age = today.year - self.dob.year
        if (today.month, today.day) < (self.dob.month, self.dob.day):
            age -= 1
        return age

    class Meta:
        db_table = 'cattle'
        ordering = ['-created_at']
        verbose_name_plural = 'cattle'
        indexes = [
            models.Index(fields=['gaushala', 'is_active'], name='idx_cattle_gaushala_active'),
            models.Index(fields=['ear_tag_no'], name='idx_cattle_ear_tag'),
        ]


class HealthRecord(models.Model):
    """Vaccinations, treatments, checkups and surgeries"""
    RECORD_TYPE_CHOICES = [
        ('VACCINATION', 'Vaccination'),
        ('TREATMENT', 'Treatment'),
        ('CHECKUP', 'Checkup'),
        ('SURGERY', 'Surgery'),
    ]

    cattle = models.ForeignKey(Cattle, on_delete=models.CASCADE, related_name='health_records')
    gaushala = models.ForeignKey(Gaushala, on_delete=models.CASCADE, related_name='health_records')
    record_type = models.CharField(max_length=20, choices=RECORD_TYPE_CHOICES)
    record_date = models.DateField()
    veterinarian_name = models.CharField(max_length=200, blank=True)
    veterinarian_license = models.CharField(max_length=100, blank=True)
    veterinarian_contact = models.CharField(max_length=20, blank=True)
    diagnosis = models.TextField(blank=True)
    treatment = models.TextField(blank=True)
    medications = models.TextField(blank=True)
    dosage_instructions = models.TextField(blank=True)
    vaccination_type = models.CharField(max_length=100, blank=True)
    next_vaccination_date = models.DateField(null=True, blank=True)
    next_checkup_date = models.DateField(null=True, blank=True)
    cost = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='health_records')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.get_record_type_display()} - {self.cattle} ({self.record_date})"

    class Meta:
        db_table = 'health_records'
        ordering = ['-record_date', '-id']
