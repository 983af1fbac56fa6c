"""
Tests for seller identity helpers and normalizers.
"""

import pytest


class TestFirstPartySeller:
    """Test first-party seller detection."""

    @pytest.mark.parametrize("name", [
        "Amazon",
        "Amazon.co.uk",
        "amazon.de",
        "  AMAZON EU S.A.R.L. ",
        "Amazon EU S.a.r.l., UK Branch",
        "Amazon Europe Core",
    ])
    def test_first_party_names(self, name):
        """Test that storefront and legal-entity names are first-party."""
        from sellers.identity import is_first_party_seller

        assert is_first_party_seller(name) is True

    @pytest.mark.parametrize("name", [
        "Acme Trading Ltd",
        "Nordic Goods AB",
        "Gulf Traders",
    ])
    def test_third_party_names(self, name):
        """Test that ordinary sellers are not first-party."""
        from sellers.identity import is_first_party_seller

        assert is_first_party_seller(name) is False

    def test_empty_name_is_not_first_party(self):
        """Test that a missing name is treated as unknown."""
        from sellers.identity import is_first_party_seller

        assert is_first_party_seller("") is False
        assert is_first_party_seller("   ") is False
        assert is_first_party_seller(None) is False

    def test_short_name_contained_in_known_name(self):
        """Test that matching works when the seller name is the shorter one."""
        from sellers.identity import is_first_party_seller

        assert is_first_party_seller("Amazon EU") is True

    def test_custom_known_names(self):
        """Test that the known-name list can be replaced."""
        from sellers.identity import is_first_party_seller

        assert is_first_party_seller("Acme Trading", known_names=("acme",)) is True
        assert is_first_party_seller("Amazon", known_names=("acme",)) is False


class TestSellerKey:
    """Test the dedup key."""

    def test_key_is_the_seller_id(self):
        """Test that ids are used verbatim."""
        from sellers.identity import normalize_seller_key

        assert normalize_seller_key("A1XYZ") == "A1XYZ"
        assert normalize_seller_key("A1XYZ") != normalize_seller_key("a1xyz")


class TestNormalizers:
    """Test text normalization helpers."""

    def test_normalize_text(self):
        """Test whitespace collapsing including non-breaking spaces."""
        from sellers.utils.normalizers import normalize_text

        assert normalize_text("  Acme\n  Trading\xa0 Ltd ") == "Acme Trading Ltd"
        assert normalize_text(None) == ""

    def test_normalize_label(self):
        """Test label normalization for lookups."""
        from sellers.utils.normalizers import normalize_label

        assert normalize_label(" VAT  Number ") == "vat number"

    def test_parse_count(self):
        """Test counts with thousands separators."""
        from sellers.utils.normalizers import parse_count

        assert parse_count("1,234") == 1234
        assert parse_count("87") == 87
        assert parse_count("n/a") is None
        assert parse_count(None) is None

    def test_parse_decimal(self):
        """Test that only the leading number is parsed."""
        from sellers.utils.normalizers import parse_decimal

        assert parse_decimal("4.7") == 4.7
        assert parse_decimal("4.7.") == 4.7
        assert parse_decimal("5") == 5.0
        assert parse_decimal(".") is None
