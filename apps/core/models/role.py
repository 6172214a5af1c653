from django.conf import settings
from django.db import models
from .base import BaseModel
from .business import Business


class Role(BaseModel):
    """
    A named role. ``business`` is the role's scope: NULL for global
    (platform) roles, a business for business-scoped roles.
    """
    name = models.CharField(max_length=125)
    business = models.ForeignKey(
        Business,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="roles",
    )

    class Meta:
        db_table = "roles"
        managed = True
        indexes = [
            models.Index(fields=["business"], name="roles_busines_9e0f12_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=['name', 'business'], name='roles_name_business_unique'),
            models.UniqueConstraint(
                fields=['name'],
                condition=models.Q(business__isnull=True),
                name='roles_name_global_unique',
            ),
        ]

    def __str__(self):
        scope = self.business_id if self.business_id is not None else "global"
        return f"{self.name}@{scope}"

    @property
    def is_global(self) -> bool:
        return self.business_id is None


class RoleAssignment(BaseModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="role_assignments",
    )
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="assignments")

    # Grants are created and deleted, never edited
    updated_at = None

    class Meta:
        db_table = "role_assignments"
        managed = True
        indexes = [
            models.Index(fields=["user"], name="role_assign_user_id_b27c55_idx"),
            models.Index(fields=["role"], name="role_assign_role_id_64ae38_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=['user', 'role'], name='role_assignments_unique')
        ]
