import uuid
from django.db import models


class Category(models.Model):
    """
    A user's named group of tasks.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)  # No FK - modular boundary
    name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'categories'

    def __str__(self):
        return self.name

    @property
    def category_id(self):
        return self.id


class Task(models.Model):
    """
    A to-do item owned by one user, optionally filed under one of their categories.

    Only `completed` changes after creation.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)  # No FK - modular boundary
    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='tasks',
    )
    task_name = models.CharField(max_length=255)
    completed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['user_id', 'category'], name='task_user_category_idx'),
        ]

    def __str__(self):
        return self.task_name

    @property
    def task_id(self):
        return self.id
