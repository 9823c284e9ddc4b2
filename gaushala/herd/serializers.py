from django.db import transaction
from rest_framework import serializers
from gaushala.sheds.models import Shed
from .models import Breed, Species, Gender, Color, Cattle, HealthRecord


class BreedSerializer(serializers.ModelSerializer):
    class Meta:
        model = Breed
        fields = ['id', 'name', 'description', 'created_at', 'updated_at']


class SpeciesSerializer(serializers.ModelSerializer):
    class Meta:
        model = Species
        fields = ['id', 'name', 'description', 'created_at', 'updated_at']


class GenderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Gender
        fields = ['id', 'name', 'created_at', 'updated_at']


class ColorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Color
        fields = ['id', 'name', 'hex_code', 'created_at', 'updated_at']

    def validate_hex_code(self, value):
        if value and (len(value) != 7 or not value.startswith('#')):
            raise serializers.ValidationError("Hex code must look like #RRGGBB")
        return value.upper() if value else value


class CattleSerializer(serializers.ModelSerializer):
    gaushala_name = serializers.CharField(source='gaushala.name', read_only=True)
    breed_name = serializers.CharField(source='breed.name', read_only=True, default=None)
    species_name = serializers.CharField(source='species.name', read_only=True, default=None)
    gender_name = serializers.CharField(source='gender.name', read_only=True, default=None)
    color_name = serializers.CharField(source='color.name', read_only=True, default=None)
    source_name = serializers.CharField(source='source.name', read_only=True, default=None)
    shed_number = serializers.CharField(source='shed.shed_number', read_only=True, default=None)
    shed_name = serializers.CharField(source='shed.shed_name', read_only=True, default=None)
    age_years = serializers.IntegerField(read_only=True)
    # Uniqueness is checked on the normalised tag in validate_rfid_tag_no
    rfid_tag_no = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = Cattle
        fields = [
            'id', 'unique_animal_id', 'name', 'gaushala', 'gaushala_name',
            'breed', 'breed_name', 'species', 'species_name', 'gender', 'gender_name', 'color', 'color_name',
            'dob', 'age_years', 'weight', 'height', 'horn_status', 'disability',
            'ear_tag_no', 'rfid_tag_no', 'microchip_no',
            'vaccination_status', 'deworming_schedule', 'medical_history', 'last_health_checkup_date',
            'vet_name', 'vet_contact',
            'milking_status', 'lactation_number', 'milk_yield_per_day', 'last_calving_date', 'calves_count',
            'pregnancy_status',
            'source', 'source_name', 'date_of_acquisition', 'previous_owner', 'date_of_entry',
            'shed', 'shed_number', 'shed_name', 'feeding_schedule',
            'is_active', 'created_at', 'updated_at',
        ]

    def validate_rfid_tag_no(self, value):
        if not value or not value.strip():
            return None
        value = value.strip().upper()
        existing = Cattle.objects.filter(rfid_tag_no=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Cattle with this RFID tag already exists")
        return value

    def _check_shed_space(self, shed, attrs):
        """Reject moving an active animal into a shed that is full or not active"""
        instance = self.instance
        is_active = attrs.get('is_active', instance.is_active if instance else True)
        if shed is None or not is_active:
            return
        moving_in = instance is None or instance.shed_id != shed.id or not instance.is_active
        if not moving_in:
            return
        if shed.status != 'ACTIVE':
            raise serializers.ValidationError({"shed": f"Shed {shed.shed_number} is not active"})
        if shed.current_occupancy >= shed.capacity:
            raise serializers.ValidationError(
                {"shed": f"Shed {shed.shed_number} is full ({shed.current_occupancy}/{shed.capacity})"}
            )

    def validate(self, attrs):
        instance = self.instance
        shed = attrs.get('shed', instance.shed if instance else None)
        gaushala = attrs.get('gaushala', instance.gaushala if instance else None)

        if shed is not None and gaushala is not None and shed.gaushala_id != gaushala.id:
            raise serializers.ValidationError({"shed": "Shed belongs to a different gaushala"})
        self._check_shed_space(shed, attrs)
        return attrs

    def save(self, **kwargs):
        # Occupancy is re-checked under a row lock on the target shed
        instance = self.instance
        shed = self.validated_data.get('shed', instance.shed if instance else None)
        with transaction.atomic():
            if shed is not None:
                locked_shed = Shed.objects.select_for_update().get(pk=shed.pk)
                self._check_shed_space(locked_shed, self.validated_data)
            return super().save(**kwargs)


class CattleBriefSerializer(serializers.ModelSerializer):
    """Compact cattle row used in lookups and nested responses"""
    shed_number = serializers.CharField(source='shed.shed_number', read_only=True, default=None)

    class Meta:
        model = Cattle
        fields = ['id', 'unique_animal_id', 'name', 'gaushala', 'rfid_tag_no', 'ear_tag_no', 'shed', 'shed_number', 'is_active']


class HealthRecordSerializer(serializers.ModelSerializer):
    cattle_name = serializers.CharField(source='cattle.name', read_only=True)
    cattle_animal_id = serializers.CharField(source='cattle.unique_animal_id', read_only=True)
    created_by_name = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = HealthRecord
        fields = [
            'id', 'cattle', 'cattle_name', 'cattle_animal_id', 'gaushala', 'record_type', 'record_date',
            'veterinarian_name', 'veterinarian_license', 'veterinarian_contact',
            'diagnosis', 'treatment', 'medications', 'dosage_instructions', 'vaccination_type',
            'next_vaccination_date', 'next_checkup_date', 'cost', 'notes',
            'created_by', 'created_by_name', 'created_at', 'updated_at',
        ]
        read_only_fields = ['gaushala', 'created_by', 'created_at', 'updated_at']

    def validate_cost(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Cost cannot be negative")
        return value

    def validate(self, attrs):
        record_date = attrs.get('record_date', self.instance.record_date if self.instance else None)
        for field in ('next_vaccination_date', 'next_checkup_date'):
            value = attrs.get(field)
            if value and record_date and value < record_date:
                raise serializers.ValidationError({field: "Must not be before the record date"})
        if 'cattle' in attrs:
            # Health records follow the animal's gaushala
            attrs['gaushala'] = attrs['cattle'].gaushala
        return attrs
