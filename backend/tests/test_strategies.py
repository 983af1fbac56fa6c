"""
Tests for the offer-page discovery strategies.
"""

from bs4 import BeautifulSoup

UK_OFFER_URL = "https://www.amazon.co.uk/gp/offer-listing/B07YDVWL4J/ref=dp_olp_NEW_mbc?condition=NEW"
DE_OFFER_URL = "https://www.amazon.de/gp/offer-listing/P2/ref=dp_olp_NEW_mbc?condition=NEW"


def _soup(markup):
    return BeautifulSoup(markup, "html.parser")


class TestIndividualStrategies:
    """Test each strategy on its own."""

    def test_storefront_links(self, html):
        """Test that /gp/aag/main links are found in document order."""
        from sellers.strategies import find_storefront_links

        found = find_storefront_links(_soup(html("offer_listing_aod.html")), UK_OFFER_URL)

        assert [(s.display_text, s.seller_id) for s in found] == [
            ("Amazon.co.uk", "A3P5ROKL5A1OLE"),
            ("Acme Trading", "A1XYZ"),
            ("Nordic Goods AB", "A2NORD"),
        ]
        assert all(s.discovery_strategy == "aag" for s in found)
        assert found[1].source_url.startswith("https://www.amazon.co.uk/gp/aag/main")

    def test_link_without_text_is_rejected(self):
        """Test that image-only seller links are skipped."""
        from sellers.strategies import find_storefront_links

        soup = _soup('<a href="/gp/aag/main?seller=A9EMPTY"><img src="/logo.png"></a>')
        assert find_storefront_links(soup, UK_OFFER_URL) == []

    def test_seller_param_links(self):
        """Test any link with a seller= query parameter."""
        from sellers.strategies import find_seller_param_links

        soup = _soup('<p><a href="/sp?ie=UTF8&seller=A5PARAM&asin=B000">Param Seller</a></p>')
        found = find_seller_param_links(soup, UK_OFFER_URL)

        assert len(found) == 1
        assert found[0].seller_id == "A5PARAM"
        assert found[0].discovery_strategy == "sellerParam"
        assert found[0].source_url == "https://www.amazon.co.uk/sp?ie=UTF8&seller=A5PARAM&asin=B000"

    def test_sold_by_label_in_previous_sibling(self):
        """Test a link right after a Sold by label."""
        from sellers.strategies import find_sold_by_links

        soup = _soup('<div><span>Sold by</span><a href="/sp?sellerID=A7BETA">Beta Handel</a></div>')
        found = find_sold_by_links(soup, DE_OFFER_URL)

        assert [(s.seller_id, s.discovery_strategy) for s in found] == [("A7BETA", "soldBy")]

    def test_sold_by_path_fallback(self):
        """Test an id taken from a /sp/seller/ID path."""
        from sellers.strategies import find_sold_by_links

        soup = _soup('<div>Sold by <a href="/sp/seller/A4PATH">Path Seller Ltd</a></div>')
        found = find_sold_by_links(soup, UK_OFFER_URL)

        assert [(s.seller_id, s.discovery_strategy) for s in found] == [("A4PATH", "soldByPath")]

    def test_sold_by_skips_fragment_and_unlabelled_links(self):
        """Test that anchors and links without a Sold by label are ignored."""
        from sellers.strategies import find_sold_by_links

        soup = _soup(
            '<div>Sold by <a href="#reviews">Reviews</a></div>'
            '<div>Sold by <a href="#">Top</a></div>'
            '<div>Visit <a href="/sp?seller=A1XYZ">Acme</a></div>'
        )
        assert find_sold_by_links(soup, UK_OFFER_URL) == []

    def test_sold_by_label_is_case_insensitive(self):
        """Test that the label matches regardless of case."""
        from sellers.strategies import find_sold_by_links

        soup = _soup('<div>SOLD BY <a href="/sp?seller=A1XYZ">Acme</a></div>')
        assert len(find_sold_by_links(soup, UK_OFFER_URL)) == 1


class TestCombinedDiscovery:
    """Test running all strategies with deduplication."""

    def test_aod_layout(self, html):
        """Test that accumulated candidates dedupe to one reference per seller."""
        from sellers.strategies import dedupe_by_seller_id, run_strategies

        candidates = run_strategies(_soup(html("offer_listing_aod.html")), UK_OFFER_URL)
        unique = dedupe_by_seller_id(candidates)

        assert [(s.display_text, s.seller_id, s.discovery_strategy) for s in unique] == [
            ("Amazon.co.uk", "A3P5ROKL5A1OLE", "aag"),
            ("Acme Trading", "A1XYZ", "aag"),
            ("Nordic Goods AB", "A2NORD", "aag"),
            ("Path Seller Ltd", "A4PATH", "soldByPath"),
        ]
        assert len(candidates) > len(unique)

    def test_first_strategy_wins_for_same_seller(self, html):
        """Test that a seller found by aag and soldBy keeps the aag reference."""
        from sellers.strategies import dedupe_by_seller_id, run_strategies

        unique = dedupe_by_seller_id(
            run_strategies(_soup(html("offer_listing_inline.html")), DE_OFFER_URL)
        )

        assert [(s.display_text, s.seller_id, s.discovery_strategy) for s in unique] == [
            ("Acme Trading", "A1XYZ", "aag"),
            ("Beta Handel", "A7BETA", "soldBy"),
        ]

    def test_no_repeated_ids(self, html):
        """Test that deduplicated output never repeats a seller id."""
        from sellers.strategies import dedupe_by_seller_id, run_strategies

        for name, url in [("offer_listing_aod.html", UK_OFFER_URL), ("offer_listing_inline.html", DE_OFFER_URL)]:
            unique = dedupe_by_seller_id(run_strategies(_soup(html(name)), url))
            ids = [s.seller_id for s in unique]
            assert len(ids) == len(set(ids))

    def test_discovery_is_idempotent(self, html):
        """Test that the same document always yields the same references."""
        from sellers.strategies import dedupe_by_seller_id, run_strategies

        soup = _soup(html("offer_listing_aod.html"))
        first = dedupe_by_seller_id(run_strategies(soup, UK_OFFER_URL))
        second = dedupe_by_seller_id(run_strategies(soup, UK_OFFER_URL))
        assert first == second

    def test_empty_page(self):
        """Test that a page without seller links yields nothing."""
        from sellers.strategies import dedupe_by_seller_id, run_strategies

        assert dedupe_by_seller_id(run_strategies(_soup("<p>No offers</p>"), UK_OFFER_URL)) == []

    def test_diagnostics(self, html):
        """Test the offer page diagnostics snapshot."""
        from sellers.strategies import collect_page_diagnostics

        diagnostics = collect_page_diagnostics(_soup(html("offer_listing_aod.html")), UK_OFFER_URL)

        assert diagnostics["has_offer_list"] is True
        assert diagnostics["has_offer_item"] is True
        assert diagnostics["has_primary_seller_link"] is True
        assert diagnostics["has_merchant_info"] is True
        assert diagnostics["seller_link_count"] >= 6
        assert len(diagnostics["seller_link_samples"]) <= 10
