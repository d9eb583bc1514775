"""
Core models for the point-of-sale back end.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Extended user model with a store role.

    Supports role-based access control:
    - ADMIN: full access, including user management
    - MANAGER: catalog management and sales reporting
    - CASHIER: checkout only
    """

    # Role choices
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    CASHIER = "CASHIER"

    ROLE_CHOICES = [
        (ADMIN, "Administrator"),
        (MANAGER, "Store Manager"),
        (CASHIER, "Cashier"),
    ]

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=CASHIER,
        help_text="User's role in the store",
    )

    full_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Display name printed on receipts and reports",
    )

    class Meta:
        db_table = "users"
        ordering = ["username"]
        verbose_name = "User"
        verbose_name_plural = "Users"
        indexes = [
            models.Index(fields=["role"], name="user_role_idx"),
        ]

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    def get_display_name(self):
        """Return the full name, falling back to the username."""
        return self.full_name or self.username

    def is_admin(self):
        """Check if user is an administrator."""
        return self.role == self.ADMIN

    def is_manager(self):
        """Check if user is a store manager."""
        return self.role == self.MANAGER

    def is_cashier(self):
        """Check if user is a cashier."""
        return self.role == self.CASHIER

    def can_manage_users(self):
        """Check if user can manage other users."""
        return self.role == self.ADMIN

    def can_manage_inventory(self):
        """Check if user can manage products and categories."""
        return self.role in [self.ADMIN, self.MANAGER]

    def can_view_reports(self):
        """Check if user can browse recorded sales."""
        return self.role in [self.ADMIN, self.MANAGER]

    def can_process_sales(self):
        """Check if user can run a checkout."""
        return self.role in [self.ADMIN, self.MANAGER, self.CASHIER]
