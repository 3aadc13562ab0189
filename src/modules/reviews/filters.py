import django_filters

from modules.reviews.constants import ReviewStatus
from modules.reviews.models import ReviewOrder


class ReviewOrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=ReviewStatus.choices)
    customer = django_filters.NumberFilter(field_name="customer_id")
    submitted_after = django_filters.DateTimeFilter(
        field_name="submitted_at", lookup_expr="gte"
    )
    submitted_before = django_filters.DateTimeFilter(
        field_name="submitted_at", lookup_expr="lte"
    )

    class Meta:
        model = ReviewOrder
        fields = ["status", "customer", "submitted_after", "submitted_before"]
