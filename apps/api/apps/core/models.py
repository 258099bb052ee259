"""
Shared model base classes.
"""
from django.core.exceptions import ValidationError
from django.db import models


class AppendOnlyModel(models.Model):
    """
    Abstract base for audit records that are written once and never changed.

    Instance-level update and delete are refused. Bulk queryset updates are
    not intercepted; services only ever create these rows.
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(
                f'{self.__class__.__name__} records are append-only and cannot be modified'
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            f'{self.__class__.__name__} records are append-only and cannot be deleted'
        )
