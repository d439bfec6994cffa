from .records import (
    ESGUpdateView,
    ESGDataView,
    ESGSubmitView,
    ESGReviewView,
    ESGPointsUpdateView,
    ESGRecordListView,
    CompanyInfoView,
    CompanyInfoRatingView,
)
from .dashboard_api import supplier_dashboard_api, admin_dashboard_api

__all__ = [
    'ESGUpdateView',
    'ESGDataView',
    'ESGSubmitView',
    'ESGReviewView',
    'ESGPointsUpdateView',
    'ESGRecordListView',
    'CompanyInfoView',
    'CompanyInfoRatingView',
    'supplier_dashboard_api',
    'admin_dashboard_api',
]
