"""Tests for the column merge helpers."""

from clinic_api.models import inventory
from clinic_api.services.merge import clamp_at_zero, replace_if_supplied


def test_clamp_at_zero():
    """Test the stock floor."""
    assert clamp_at_zero(-1) == 0
    assert clamp_at_zero(0) == 0
    assert clamp_at_zero(9) == 9


def test_replace_if_supplied():
    """A missing value keeps the stored column; anything else replaces it."""
    assert replace_if_supplied(None, inventory.c.category) is inventory.c.category
    assert replace_if_supplied("Antibiotic", inventory.c.category) == "Antibiotic"
    assert replace_if_supplied(0, inventory.c.stock) == 0
    assert replace_if_supplied(False, inventory.c.description) is False
