from rest_framework import serializers

from ..models import FORM_TYPES, SCORE_FIELDS, CustomUser, SupplierProfile


class SupplierProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = SupplierProfile
        fields = [
            "company_name", "contact_person", "phone", "address", "industry",
            "description", "website", "esg_scores", "form_submissions",
            "created_at", "updated_at",
        ]
        read_only_fields = ["esg_scores", "form_submissions", "created_at", "updated_at"]


class SupplierSerializer(serializers.ModelSerializer):
    """
    A supplier account with its profile. Suppliers without a profile yet are
    shown with ``profile`` set to null.
    """
    profile = serializers.SerializerMethodField()
    profileComplete = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = ["id", "email", "name", "role", "date_joined", "profile", "profileComplete"]
        read_only_fields = fields

    @staticmethod
    def _supplier_profile(obj):
        # Served from the select_related cache when the view joined it.
        try:
            return obj.supplier_profile
        except SupplierProfile.DoesNotExist:
            return None

    def get_profile(self, obj):
        profile = self._supplier_profile(obj)
        return SupplierProfileSerializer(profile).data if profile else None

    def get_profileComplete(self, obj):
        return self._supplier_profile(obj) is not None


class EsgScoresSerializer(serializers.Serializer):
    """Partial update of the admin-maintained ESG score summary."""
    environmental = serializers.FloatField(required=False, allow_null=True)
    social = serializers.FloatField(required=False, allow_null=True)
    quality = serializers.FloatField(required=False, allow_null=True)
    governance = serializers.FloatField(required=False, allow_null=True)

    def validate(self, attrs):
        if not any(attrs.get(field) is not None for field in SCORE_FIELDS):
            raise serializers.ValidationError(
                f"At least one of {', '.join(SCORE_FIELDS)} is required"
            )
        return attrs


class FormSubmissionSerializer(serializers.Serializer):
    formType = serializers.ChoiceField(choices=FORM_TYPES)
    submitted = serializers.BooleanField()
