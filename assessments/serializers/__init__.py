from .records import (
    ESGPatchSerializer,
    CompanyInfoPatchSerializer,
    ReviewSerializer,
    PointsOverrideSerializer,
    CompanyInfoRatingSerializer,
    ESGRecordSerializer,
    ESGRecordListSerializer,
)

__all__ = [
    'ESGPatchSerializer',
    'CompanyInfoPatchSerializer',
    'ReviewSerializer',
    'PointsOverrideSerializer',
    'CompanyInfoRatingSerializer',
    'ESGRecordSerializer',
    'ESGRecordListSerializer',
]
