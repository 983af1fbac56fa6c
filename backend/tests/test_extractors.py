"""
Tests for text and id extraction utilities.
"""

import pytest
from bs4 import BeautifulSoup


def _soup(markup):
    return BeautifulSoup(markup, "html.parser")


class TestInnerText:
    """Test the rendered-text approximation."""

    def test_inline_elements_share_a_line(self):
        """Test that adjacent spans render as one line."""
        from sellers.utils.extractors import inner_text

        soup = _soup("<div><span>Business Name:</span><span>Acme Ltd</span></div>")
        assert inner_text(soup) == "Business Name:Acme Ltd"

    def test_block_elements_break_lines(self):
        """Test that divs, headings and br produce separate lines."""
        from sellers.utils.extractors import text_lines

        soup = _soup(
            "<section><h3>Detailed Seller Information</h3>"
            "<div>Business Address:</div><div>12 High Street<br>London</div></section>"
        )
        assert text_lines(soup) == [
            "Detailed Seller Information",
            "Business Address:",
            "12 High Street",
            "London",
        ]

    def test_scripts_styles_and_comments_are_skipped(self):
        """Test that non-rendered content is ignored."""
        from sellers.utils.extractors import inner_text

        soup = _soup(
            "<div><style>.x{}</style><script>var a = 1;</script>"
            "<!-- hidden --><p>Visible   text</p></div>"
        )
        assert inner_text(soup) == "Visible text"

    def test_empty_node(self):
        """Test that None renders as empty text."""
        from sellers.utils.extractors import inner_text, text_lines

        assert inner_text(None) == ""
        assert text_lines(_soup("<div>   </div>")) == []

    def test_page_text_uses_body(self):
        """Test that the head title is not part of the page text."""
        from sellers.utils.extractors import page_text

        soup = _soup("<html><head><title>Title</title></head><body><p>Body</p></body></html>")
        assert page_text(soup) == "Body"


class TestSellerIds:
    """Test seller id extraction from URLs."""

    @pytest.mark.parametrize("url,expected", [
        ("https://www.amazon.de/gp/aag/main?seller=A1XYZ", "A1XYZ"),
        ("https://www.amazon.de/sp?ie=UTF8&sellerID=A2B3C&asin=B000", "A2B3C"),
        ("https://www.amazon.de/sp?seller=A1XYZ&sellerID=OTHER", "A1XYZ"),
        ("https://www.amazon.de/dp/B000", None),
        ("https://www.amazon.de/sp?seller=", None),
        ("", None),
        (None, None),
    ])
    def test_extract_seller_id(self, url, expected):
        """Test the seller and sellerID query parameters."""
        from sellers.utils.extractors import extract_seller_id

        assert extract_seller_id(url) == expected

    @pytest.mark.parametrize("url,expected", [
        ("https://www.amazon.se/sp/seller/A3QWE", "A3QWE"),
        ("https://www.amazon.se/sp?seller=A3QWE", "A3QWE"),
        ("https://www.amazon.se/sp/storefront", None),
    ])
    def test_extract_seller_id_from_path(self, url, expected):
        """Test the path-segment fallback."""
        from sellers.utils.extractors import extract_seller_id_from_path

        assert extract_seller_id_from_path(url) == expected

    def test_resolve_href(self):
        """Test that relative hrefs are resolved against the page URL."""
        from sellers.utils.extractors import resolve_href

        base = "https://www.amazon.co.uk/gp/offer-listing/B000/ref=x?condition=NEW"
        assert resolve_href("/sp?seller=A1", base) == "https://www.amazon.co.uk/sp?seller=A1"
        assert resolve_href("https://www.amazon.de/sp", base) == "https://www.amazon.de/sp"
        assert resolve_href(None, base) == ""


class TestRatings:
    """Test rating statistic extraction."""

    def test_rating(self):
        """Test the X out of 5 stars pattern."""
        from sellers.utils.extractors import extract_rating

        assert extract_rating("4.6 out of 5 stars") == 4.6
        assert extract_rating("0 out of 5 stars") == 0.0
        assert extract_rating("7 out of 5 stars") is None
        assert extract_rating("no rating yet") is None

    def test_positive_percent(self):
        """Test the NN% positive pattern."""
        from sellers.utils.extractors import extract_positive_percent

        assert extract_positive_percent("92% positive in the last 12 months") == 92
        assert extract_positive_percent("100% positive") == 100
        assert extract_positive_percent("250% positive") is None
        assert extract_positive_percent("nothing") is None

    def test_rating_count(self):
        """Test parenthesized rating counts."""
        from sellers.utils.extractors import extract_rating_count

        assert extract_rating_count("(1,234 ratings)") == 1234
        assert extract_rating_count("(1 rating)") == 1
        assert extract_rating_count("1,234 ratings") is None


class TestCustomerServicePhone:
    """Test the customer service phone fallback."""

    def test_phone_after_colon(self):
        """Test a label followed by a colon."""
        from sellers.utils.extractors import extract_customer_service_phone

        text = "About\nCustomer Service Phone: +44 20 7946 0958\nMore"
        assert extract_customer_service_phone(text) == "+44 20 7946 0958"

    def test_phone_on_next_line(self):
        """Test a label followed by a line break."""
        from sellers.utils.extractors import extract_customer_service_phone

        text = "customer service phone\n+971 4 000 0000"
        assert extract_customer_service_phone(text) == "+971 4 000 0000"

    def test_missing_phone(self):
        """Test that no label means no phone."""
        from sellers.utils.extractors import extract_customer_service_phone

        assert extract_customer_service_phone("Phone number: 123") is None
