"""Tests for newsfound.scrapers.html."""

from newsfound.scrapers.html import ContainerMarker, extract_first, extract_region, find_container


class TestContainerMarker:
    def test_class_token_match(self) -> None:
        marker = ContainerMarker("div", "class", "story-content")
        assert marker.opening_pattern().search('<div class="wide story-content dark">')
        assert not marker.opening_pattern().search('<div class="story-contents">')

    def test_id_exact_match(self) -> None:
        marker = ContainerMarker("div", "id", "content")
        assert marker.opening_pattern().search("<div data-x='1' id='content'>")
        assert not marker.opening_pattern().search('<div id="content-main">')

    def test_bare_tag_does_not_match_prefix(self) -> None:
        assert not ContainerMarker("main").opening_pattern().search("<mainframe>")

    def test_str(self) -> None:
        assert str(ContainerMarker("main")) == "<main>"
        assert str(ContainerMarker("div", "id", "content")) == "div#content"
        assert str(ContainerMarker("div", "class", "body")) == "div.body"


class TestExtractRegion:
    def test_nested_same_tag(self) -> None:
        html = '<div id="content"><div><p>one</p></div><p>two</p></div><div>after</div>'
        region = extract_region(html, ContainerMarker("div", "id", "content"))
        assert region == "<div><p>one</p></div><p>two</p>"

    def test_case_insensitive_tags(self) -> None:
        html = "<MAIN><p>body</p></MAIN>"
        assert extract_region(html, ContainerMarker("main")) == "<p>body</p>"

    def test_missing_element(self) -> None:
        assert extract_region("<p>nothing</p>", ContainerMarker("main")) is None

    def test_unclosed_element(self) -> None:
        assert find_container("<main><p>never closed", ContainerMarker("main")) is None


class TestExtractFirst:
    def test_first_non_empty_marker_wins(self) -> None:
        html = '<div class="empty"> </div><article>story</article>'
        markers = [ContainerMarker("div", "class", "empty"), ContainerMarker("article")]
        assert extract_first(html, markers) == "story"

    def test_none_when_nothing_matches(self) -> None:
        assert extract_first("<p>x</p>", [ContainerMarker("article")]) is None
