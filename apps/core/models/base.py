from django.db import models


class BaseModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class MissingBusinessContext(RuntimeError):
    """Raised when a business-owned row is saved with no business to own it."""


class BusinessScopedQuerySet(models.QuerySet):
    """
    Queries over rows owned by a business.

    The business is always passed in explicitly, either directly or through
    the request's ``TenantResolver``; nothing is read from ambient state.
    """

    def for_business(self, business):
        """
        Rows owned by one business.

        Args:
            business: Business instance or primary key

        Returns:
            QuerySet: rows filtered to that business
        """
        business_id = getattr(business, 'pk', business)
        return self.filter(business_id=business_id)

    def for_resolver(self, resolver):
        """
        Rows owned by the resolver's current business.

        With no current business (platform users without a context) the
        queryset is returned unfiltered.
        """
        business_id = resolver.current_business_id
        if business_id is None:
            return self.all()
        return self.filter(business_id=business_id)

    def all_businesses(self):
        """Every row across businesses, for global administration."""
        return self.all()

    def create_for(self, resolver, **kwargs):
        """Create a row owned by the resolver's current business unless ``business`` is given."""
        obj = self.model(**kwargs)
        obj.save(force_insert=True, using=self.db, resolver=resolver)
        return obj


class BusinessOwnedModel(BaseModel):
    """
    Abstract model for rows that belong to exactly one business.

    ``business`` is filled from the resolver on first save when it was not
    set explicitly. Saving without either raises ``MissingBusinessContext``.
    """
    business = models.ForeignKey(
        'core.Business',
        on_delete=models.CASCADE,
        related_name='%(app_label)s_%(class)s_set',
    )

    objects = BusinessScopedQuerySet.as_manager()

    class Meta:
        abstract = True

    def save(self, *args, resolver=None, **kwargs):
        if self.business_id is None:
            business_id = resolver.current_business_id if resolver is not None else None
            if business_id is None:
                raise MissingBusinessContext(
                    f'Cannot create {type(self).__name__} without an active business context.'
                )
            self.business_id = business_id
        super().save(*args, **kwargs)
