from django.apps import AppConfig


class AssessmentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'assessments'
    verbose_name = 'ESG Assessments'

    def ready(self):
        # Build and validate the section registry at startup.
        import assessments.sections  # noqa
