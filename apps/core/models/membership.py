from django.conf import settings
from django.db import models
from .base import BaseModel
from .business import Business


class BusinessUser(BaseModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    business = models.ForeignKey(Business, on_delete=models.CASCADE)

    class Meta:
        db_table = "business_user"
        managed = True
        indexes = [
            models.Index(fields=["user"], name="business_us_user_id_5a7b90_idx"),
            models.Index(fields=["business"], name="business_us_busines_c41d07_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=['user', 'business'], name='business_user_unique')
        ]
