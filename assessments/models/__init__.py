from .records import ESGRecord, default_overall_score

__all__ = [
    'ESGRecord',
    'default_overall_score',
]
