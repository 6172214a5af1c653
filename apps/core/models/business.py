from django.conf import settings
from django.db import models
from .base import BaseModel


class Business(BaseModel):
    """An isolated workspace (tenant) owned by exactly one user."""
    name = models.CharField(max_length=255)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="owned_businesses",
    )
    # All members, owner included
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="BusinessUser",
        related_name="businesses",
    )

    class Meta:
        db_table = "businesses"
        managed = True
        ordering = ["id"]
        indexes = [
            models.Index(fields=["owner"], name="businesses_owner_i_3f1c2a_idx"),
            models.Index(fields=["created_at"], name="businesses_created_8d2e41_idx"),
        ]

    def __str__(self):
        return self.name
