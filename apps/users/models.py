import logging

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, Group, PermissionsMixin
from django.db import models

from apps.common.constants import ROLE_GROUP_NAMES, UserRole
from apps.common.models import BaseModel

logger = logging.getLogger(__name__)


class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("The Email field must be set")
        # every account is a back-office account, customers order anonymously
        extra_fields.setdefault("is_staff", True)
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", UserRole.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin, BaseModel):
    email = models.EmailField(unique=True)
    first_name = models.CharField(max_length=50, blank=True)
    last_name = models.CharField(max_length=50, blank=True)
    is_staff = models.BooleanField(default=False)
    role = models.CharField(max_length=20, choices=UserRole.choices, default=UserRole.STAFF)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    def save(self, *args, **kwargs):
        is_new = self._state.adding
        old_role = None

        if not is_new:
            old_role = User.objects.filter(pk=self.pk).values_list("role", flat=True).first()

        super().save(*args, **kwargs)

        if is_new or old_role != self.role:
            self.assign_group_by_role()

    def assign_group_by_role(self):
        role_groups = Group.objects.filter(name__in=ROLE_GROUP_NAMES)
        if role_groups.exists():
            self.groups.remove(*role_groups)

        group_name = self.get_group_name()
        if group_name:
            try:
                group = Group.objects.get(name=group_name)
                self.groups.add(group)
            except Group.DoesNotExist:
                logger.warning(f"Group '{group_name}' does not exist for user {self.email}")

    def get_group_name(self):
        if self.role == UserRole.ADMIN:
            return "admin"
        elif self.role == UserRole.STAFF:
            return "staff"
        return None

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip() or self.email

    def __str__(self):
        return f"{self.email} ({self.get_role_display()})"
