from rest_framework import serializers

from ..models import ESGRecord
from ..sections import CATEGORIES, COMPANY_INFO_CATEGORY


class ESGPatchSerializer(serializers.Serializer):
    """
    Shape check of an inbound patch. Whether the category/section pair and
    the payload fit the section schema is decided by the merge engine.
    """
    category = serializers.ChoiceField(choices=CATEGORIES)
    section = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    data = serializers.JSONField()

    def validate(self, attrs):
        if attrs['category'] != COMPANY_INFO_CATEGORY and not attrs.get('section'):
            raise serializers.ValidationError({'section': 'This field is required.'})
        if not isinstance(attrs['data'], dict):
            raise serializers.ValidationError({'data': 'Must be an object.'})
        return attrs


class CompanyInfoPatchSerializer(serializers.Serializer):
    data = serializers.JSONField()

    def validate_data(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Must be an object.")
        return value


class ReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in ESGRecord.REVIEW_STATUSES])
    reviewComments = serializers.CharField(source='comments', required=False, allow_blank=True, default='')


class PointsOverrideSerializer(serializers.Serializer):
    esgDataId = serializers.IntegerField()
    category = serializers.ChoiceField(choices=CATEGORIES)
    section = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    points = serializers.FloatField(min_value=0)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class CompanyInfoRatingSerializer(serializers.Serializer):
    esgDataId = serializers.IntegerField()
    points = serializers.FloatField(min_value=0)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class ESGRecordSerializer(serializers.ModelSerializer):
    """Full record, with category and score keys in their wire names."""
    userId = serializers.IntegerField(source='user_id', read_only=True)
    companyId = serializers.IntegerField(source='company_id', read_only=True)
    companyInfo = serializers.JSONField(source='company_info', read_only=True)
    overallScore = serializers.JSONField(source='overall_score', read_only=True)
    reviewComments = serializers.CharField(source='review_comments', read_only=True)
    reviewedBy = serializers.IntegerField(source='reviewed_by_id', read_only=True, allow_null=True)
    statusChangedAt = serializers.DateTimeField(source='status_changed_at', read_only=True)
    lastUpdated = serializers.DateTimeField(source='last_updated', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = ESGRecord
        fields = [
            'id', 'userId', 'companyId', 'companyInfo', 'environment', 'social',
            'quality', 'governance', 'overallScore', 'status', 'reviewComments',
            'reviewedBy', 'statusChangedAt', 'version', 'lastUpdated', 'createdAt',
        ]
        read_only_fields = fields


class ESGRecordListSerializer(ESGRecordSerializer):
    """Admin listing: the full record plus the owner's contact details."""
    user = serializers.SerializerMethodField()

    class Meta(ESGRecordSerializer.Meta):
        fields = ESGRecordSerializer.Meta.fields + ['user']

    def get_user(self, obj):
        return {
            'id': obj.user_id,
            'email': obj.user.email,
            'name': obj.user.name,
        }
