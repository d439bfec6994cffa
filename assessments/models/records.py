from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ..sections import COMPANY_INFO_CATEGORY, SCORED_CATEGORIES
from ..services.scoring import aggregate_scores


def default_overall_score():
    return {category: 0 for category in SCORED_CATEGORIES + ('total',)}


class ESGRecord(models.Model):
    """
    ESG self-assessment document of one supplier.

    There is one record per (user, company) pair. Category data is stored as
    JSON documents keyed by sub-section name; the aggregate scores in
    ``overall_score`` are recomputed on every write.
    """

    class Status(models.TextChoices):
        DRAFT = 'draft', _('Draft')
        SUBMITTED = 'submitted', _('Submitted')
        REVIEWED = 'reviewed', _('Reviewed')
        APPROVED = 'approved', _('Approved')
        REJECTED = 'rejected', _('Rejected')

    REVIEW_STATUSES = (Status.REVIEWED, Status.APPROVED, Status.REJECTED)

    # Wire name of each category -> model field holding it.
    CATEGORY_FIELDS = {
        'environment': 'environment',
        'social': 'social',
        'quality': 'quality',
        'governance': 'governance',
        COMPANY_INFO_CATEGORY: 'company_info',
    }

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='esg_records',
    )
    company = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='company_esg_records',
        help_text="Owning company; the user itself when it has no parent company",
    )

    company_info = models.JSONField(default=dict, blank=True)
    environment = models.JSONField(default=dict, blank=True)
    social = models.JSONField(default=dict, blank=True)
    quality = models.JSONField(default=dict, blank=True)
    governance = models.JSONField(default=dict, blank=True)

    overall_score = models.JSONField(default=default_overall_score, blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    review_comments = models.TextField(blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_esg_records',
    )
    status_changed_at = models.DateTimeField(null=True, blank=True)

    version = models.PositiveIntegerField(default=0, help_text="Bumped on every committed write")
    last_updated = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['user', 'company'], name='unique_esg_record_owner'),
        ]
        indexes = [
            models.Index(fields=['status'], name='esg_record_status_idx'),
            models.Index(fields=['last_updated'], name='esg_record_updated_idx'),
        ]
        ordering = ['-last_updated']
        verbose_name = "ESG Record"
        verbose_name_plural = "ESG Records"

    def __str__(self):
        return f"ESG record of {self.user} ({self.get_status_display()})"

    def get_category(self, category):
        return getattr(self, self.CATEGORY_FIELDS[category]) or {}

    def set_category(self, category, value):
        setattr(self, self.CATEGORY_FIELDS[category], value)

    def as_document(self):
        """Category data keyed by wire name, the shape the calculators work on."""
        return {category: self.get_category(category) for category in self.CATEGORY_FIELDS}

    def recalculate_scores(self):
        self.overall_score = aggregate_scores(self.as_document())
        return self.overall_score

    def save(self, *args, **kwargs):
        self.recalculate_scores()
        self.last_updated = timezone.now()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | {'overall_score', 'last_updated', 'version'}
        self.version = (self.version or 0) + 1
        super().save(*args, **kwargs)

    def compare_and_swap(self, expected_version):
        """
        Write category data, scores and review state only if nobody committed since
        ``expected_version`` was read. Returns True when the write happened.
        """
        self.recalculate_scores()
        now = timezone.now()
        updated = type(self).objects.filter(pk=self.pk, version=expected_version).update(
            company_info=self.company_info,
            environment=self.environment,
            social=self.social,
            quality=self.quality,
            governance=self.governance,
            overall_score=self.overall_score,
            status=self.status,
            review_comments=self.review_comments,
            reviewed_by=self.reviewed_by,
            status_changed_at=self.status_changed_at,
            version=expected_version + 1,
            last_updated=now,
        )
        if updated:
            self.version = expected_version + 1
            self.last_updated = now
        return bool(updated)
