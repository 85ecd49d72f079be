"""
Tests for content analyzer module
"""
import pytest
import requests
from unittest.mock import Mock

import content_analyzer
from content_analyzer import ContentAnalyzer, ContentFetchError, NO_HEADINGS_PLACEHOLDER, UNTITLED


@pytest.fixture
def analyzer(test_config):
    return ContentAnalyzer(test_config, session=Mock())


def _long_structured_text():
    body = " ".join(f"term{i}" for i in range(400))
    return f"# Intro\n# Details\n# Summary\n{body}"


class TestContentAudit:
    """Tests for the local audit heuristic"""

    def test_empty_text_gets_baseline_audit(self, analyzer):
        """Empty text still produces a full audit"""
        audit = analyzer.audit("")

        assert audit.score == 40
        assert audit.title == UNTITLED
        assert audit.description == "..."
        assert audit.headings == [NO_HEADINGS_PLACEHOLDER]
        assert audit.keyword_density == []
        assert len(audit.recommendations) == 6

    def test_keyword_density_ordering(self, analyzer):
        audit = analyzer.audit("apple apple apple banana banana cherry")

        assert [entry.keyword for entry in audit.keyword_density] == ["apple", "banana", "cherry"]
        assert audit.keyword_density[0].density == 50.0
        assert audit.keyword_density[1].density == 33.33
        assert audit.keyword_density[2].density == 16.67

    def test_density_ties_round_half_up(self, analyzer):
        text = "alpha " + " ".join(["x"] * 31)
        audit = analyzer.audit(text)

        # 1 of 32 tokens is exactly 3.125%
        assert audit.keyword_density[0].density == 3.13

    def test_density_keeps_top_five_in_text_order_on_ties(self, analyzer):
        audit = analyzer.audit("zeta alpha gamma delta omega sigma kappa")

        assert [entry.keyword for entry in audit.keyword_density] == ["zeta", "alpha", "gamma", "delta", "omega"]

    def test_stop_words_and_short_tokens_ignored(self, analyzer):
        audit = analyzer.audit("the the with with that that and cat dog")

        assert audit.keyword_density == []
        # No density bonus without a top keyword
        assert audit.score == 40

    def test_tokens_are_case_insensitive(self, analyzer):
        audit = analyzer.audit("Python python PYTHON")

        assert audit.keyword_density[0].keyword == "python"
        assert audit.keyword_density[0].density == 100.0

    def test_heading_and_length_bonuses(self, analyzer):
        audit = analyzer.audit(_long_structured_text())

        assert audit.headings == ["# Intro", "# Details", "# Summary"]
        # 40 base + 20 length + 15 headings + 15 healthy density
        assert audit.score == 90
        assert audit.recommendations[1] == "Heading structure looks diverse."

    def test_score_caps_at_100(self, analyzer):
        body = " ".join(f"term{i}" for i in range(1200))
        audit = analyzer.audit(f"# One\n# Two\n# Three\n{body}")

        assert audit.score == 100
        assert audit.recommendations[0] == "Good content length detected."

    def test_upper_case_headings_with_long_body(self, analyzer):
        body = " ".join(f"word{i}" for i in range(1200))
        audit = analyzer.audit(f"INTRODUCTION\nMAIN POINTS\nCONCLUSION\n{body}")

        assert audit.headings == ["INTRODUCTION", "MAIN POINTS", "CONCLUSION"]
        assert audit.score >= 85

    def test_all_caps_lines_are_headings(self, analyzer):
        text = "KEYWORD BASICS\nSome regular sentence here.\n2024\n"
        audit = analyzer.audit(text)

        assert audit.headings == ["KEYWORD BASICS", "2024"]

    def test_long_lines_are_not_headings(self, analyzer):
        text = "#" + "A" * 120
        audit = analyzer.audit(text)

        assert audit.headings == [NO_HEADINGS_PLACEHOLDER]

    def test_title_and_description_truncation(self, analyzer):
        first_line = "x" * 100
        text = first_line + "\n" + "y" * 200
        audit = analyzer.audit(text)

        assert audit.title == "x" * 60
        assert audit.description == text[:155] + "..."

    def test_keyword_stuffing_recommendation(self, analyzer):
        audit = analyzer.audit("rank rank rank rank other")

        assert audit.keyword_density[0].density == 80.0
        assert audit.recommendations[2] == "Keyword stuffing detected. Reduce top keyword frequency."
        assert audit.score == 40

    def test_recommendations_fixed_order(self, analyzer):
        audit = analyzer.audit("short text about gardening")

        assert audit.recommendations == [
            "Content length is low. Aim for 1,000+ words for better authority.",
            "Add more subheadings (H2, H3) to improve readability.",
            "Keyword stuffing detected. Reduce top keyword frequency.",
            "Ensure your primary keyword appears in the first 100 words.",
            "Add internal links to related high-value pages.",
            "Optimize images with descriptive ALT text containing secondary keywords.",
        ]

    def test_audit_is_deterministic(self, analyzer):
        text = _long_structured_text()
        assert analyzer.audit(text) == analyzer.audit(text)

    def test_module_level_audit(self):
        audit = content_analyzer.audit("apple apple banana")
        assert audit.keyword_density[0].keyword == "apple"


class TestHTMLAudit:
    """Tests for HTML extraction and URL audits"""

    def test_audit_html_keeps_title_and_headings(self, analyzer, mock_http_response):
        audit = analyzer.audit_html(mock_http_response.text)

        assert audit.title == "Test Page"
        assert audit.headings == ["# Main Heading", "# Sub Heading"]
        keywords = [entry.keyword for entry in audit.keyword_density]
        assert "tracking" not in keywords

    def test_audit_url_success(self, analyzer, mock_http_response):
        analyzer.session.get.return_value = mock_http_response

        audit = analyzer.audit_url("https://example.com")

        analyzer.session.get.assert_called_once_with("https://example.com", timeout=5)
        assert audit.title == "Test Page"

    def test_audit_url_http_error(self, analyzer):
        response = Mock()
        response.status_code = 404
        analyzer.session.get.return_value = response

        with pytest.raises(ContentFetchError):
            analyzer.audit_url("https://example.com/notfound")

    def test_audit_url_network_error(self, analyzer):
        analyzer.session.get.side_effect = requests.exceptions.ConnectionError("Network error")

        with pytest.raises(ContentFetchError):
            analyzer.audit_url("https://example.com")
