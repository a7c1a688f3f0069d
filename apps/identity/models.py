import uuid
from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """
    Account that owns categories and tasks.

    Other apps store only the UUID (no FK) so ownership checks never
    need a join into identity.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        ordering = ['username']

    def __str__(self):
        return self.email or self.username
