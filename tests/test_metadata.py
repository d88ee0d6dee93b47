"""Tests for publication date and title lookup."""

from bs4 import BeautifulSoup

from news_scraper.metadata import extract_date, extract_title, normalize_date


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestExtractDate:
    def test_article_published_time_is_normalized(self):
        soup = soup_of(
            '<head><meta property="article:published_time" '
            'content="2025-06-19T10:00:00Z"></head>'
        )
        assert extract_date(soup) == "2025-06-19"

    def test_published_time_wins_over_other_sources(self):
        soup = soup_of(
            '<head><meta name="date" content="2024-01-01">'
            '<meta property="article:published_time" content="2025-06-19"></head>'
            '<body><time datetime="2023-03-03">March</time></body>'
        )
        assert extract_date(soup) == "2025-06-19"

    def test_named_meta_tags_are_probed_in_order(self):
        soup = soup_of(
            '<head><meta name="pubdate" content="2024-02-02">'
            '<meta name="publish_date" content="2024-05-05"></head>'
        )
        assert extract_date(soup) == "2024-05-05"

    def test_empty_meta_content_is_ignored(self):
        soup = soup_of(
            '<head><meta property="article:published_time" content="  "></head>'
            '<body><time datetime="2023-03-03T08:00:00+02:00">Friday</time></body>'
        )
        assert extract_date(soup) == "2023-03-03"

    def test_date_class_container_text(self):
        soup = soup_of('<body><span class="published">June 19, 2025</span></body>')
        assert extract_date(soup) == "2025-06-19"

    def test_unparseable_date_is_returned_trimmed(self):
        soup = soup_of('<head><meta name="date" content="  sometime soon  "></head>')
        assert extract_date(soup) == "sometime soon"

    def test_missing_date_gives_none(self):
        assert extract_date(soup_of("<p>No dates here</p>")) is None

    def test_normalize_date_handles_blank_values(self):
        assert normalize_date(None) is None
        assert normalize_date("   ") is None


class TestExtractTitle:
    def test_uses_title_element(self):
        soup = soup_of("<head><title>  Schools adopt\n new tools </title></head><h1>Other</h1>")
        assert extract_title(soup) == "Schools adopt new tools"

    def test_falls_back_to_first_heading(self):
        soup = soup_of("<head><title> </title></head><body><h1>First</h1><h1>Second</h1></body>")
        assert extract_title(soup) == "First"

    def test_empty_when_nothing_matches(self):
        assert extract_title(soup_of("<p>text</p>")) == ""
