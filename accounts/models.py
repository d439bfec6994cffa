"""
Database tables definition for custom users and supplier profiles
"""

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

FORM_TYPES = ('environment', 'social', 'quality', 'governance')
SCORE_FIELDS = ('environmental', 'social', 'quality', 'governance')


class RoleChoices(models.TextChoices):
    ADMIN = "admin", _("Admin")
    COMPANY = "company", _("Company")
    SUPPLIER = "supplier", _("Supplier")


class CustomUserManager(BaseUserManager):
    """
    Class for handling custom user creation
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create custom user

        Args:
            email (string)
            password (string)

        Raises:
            ValueError: if email is missing

        Returns:
            created user
        """
        if not email:
            raise ValueError("The Email field must be set")

        email = self.normalize_email(email)
        extra_fields.setdefault('is_active', True)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password, **extra_fields):
        """
        Create and return a superuser with the given email and password.
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', RoleChoices.ADMIN)

        if not extra_fields.get('is_staff'):
            raise ValueError("Superuser must have is_staff=True.")
        if not extra_fields.get('is_superuser'):
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)

    def create_platform_admin(self, email, password, **extra_fields):
        """
        Create a platform admin who reviews supplier ESG data.

        Raises:
            ValueError: If email or password is missing
        """
        if not email or not password:
            raise ValueError("Email and password are required for a platform admin")

        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('role', RoleChoices.ADMIN)
        return self.create_user(email, password, **extra_fields)


class CustomUser(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model where email is the unique identifier for authentication.
    """
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=100, blank=True)
    date_joined = models.DateTimeField(auto_now_add=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.SUPPLIER
    )
    company = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members',
        help_text="Company account this user reports ESG data for. Empty means the user is its own company."
    )

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        """Check if user has any admin privileges"""
        return self.is_superuser or self.role == RoleChoices.ADMIN

    @property
    def is_supplier(self):
        return self.role == RoleChoices.SUPPLIER


def default_esg_scores():
    return {field: 0 for field in SCORE_FIELDS + ('overall',)}


def default_form_submissions():
    return {form_type: {'submitted': False, 'lastUpdated': None} for form_type in FORM_TYPES}


class SupplierProfile(models.Model):
    """
    Contact details and coarse ESG workflow state of a supplier.

    ``esg_scores`` is an admin-maintained summary (0-100 per category) and
    ``form_submissions`` records which forms the supplier has handed in. Both
    are independent of the supplier's ESGRecord.
    """
    user = models.OneToOneField(CustomUser, on_delete=models.CASCADE, related_name='supplier_profile')
    company_name = models.CharField(max_length=200)
    contact_person = models.CharField(max_length=100)
    phone = models.CharField(max_length=50, blank=True)
    address = models.TextField(blank=True)
    industry = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    website = models.URLField(blank=True)

    esg_scores = models.JSONField(default=default_esg_scores, blank=True)
    form_submissions = models.JSONField(default=default_form_submissions, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Supplier Profile"
        verbose_name_plural = "Supplier Profiles"

    def __str__(self):
        return f"{self.company_name} ({self.user.email})"

    def save(self, *args, **kwargs):
        self.updated_at = timezone.now()
        super().save(*args, **kwargs)
