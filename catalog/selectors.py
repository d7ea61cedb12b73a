# catalog/selectors.py
from .models import TestSeries


def get_product(product_id):
    """Active test series by id. Raises TestSeries.DoesNotExist."""
    return TestSeries.objects.get(pk=product_id, is_active=True)
