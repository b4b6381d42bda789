import requests

from conftest import FakeResponse, FakeSession
from newsmood.models.datatypes import Article
from newsmood.providers.scraper import ArticleScraper, extract_body

PAGE = """
<html><body>
  <header><p>Subscribe today</p></header>
  <section name="articleBody">
    <div><p>First paragraph of the <a href="#">story</a>.</p></div>
    <p>  Second
       paragraph.  </p>
    <p></p>
  </section>
  <footer><p>Copyright</p></footer>
</body></html>
"""


def _article(n: int) -> Article:
    return Article(url=f"https://example.com/{n}", published_at="2024-05-01T00:00:00Z", title=f"T{n}")


def test_extract_body_joins_matching_paragraphs():
    body = extract_body(PAGE, 'section[name="articleBody"] p')

    assert body == "First paragraph of the story. Second paragraph."


def test_extract_body_returns_empty_string_when_selector_misses():
    assert extract_body(PAGE, "article p.story-body") == ""


def test_get_article_body_returns_none_for_non_200():
    session = FakeSession({"https://example.com/1": FakeResponse(404, text=PAGE)})
    scraper = ArticleScraper(session=session)

    assert scraper.get_article_body("https://example.com/1") is None
    assert len(session.calls) == 1


def test_get_article_body_returns_none_on_transport_error():
    session = FakeSession({"https://example.com/1": requests.ConnectionError("reset")})
    scraper = ArticleScraper(session=session)

    assert scraper.get_article_body("https://example.com/1") is None


def test_scraper_sends_user_agent_and_timeout():
    session = FakeSession({"https://example.com/1": FakeResponse(200, text=PAGE)})
    scraper = ArticleScraper(session=session, user_agent="tester/1.0", timeout=7)

    scraper.get_article_body("https://example.com/1")

    assert session.headers["User-Agent"] == "tester/1.0"
    assert session.calls[0]["timeout"] == 7


def test_fetch_bodies_is_sequential_with_fixed_delay(no_sleep):
    session = FakeSession({
        "https://example.com/1": FakeResponse(200, text=PAGE),
        "https://example.com/2": FakeResponse(500, text="oops"),
        "https://example.com/3": FakeResponse(200, text=PAGE),
    })
    scraper = ArticleScraper(session=session, delay_seconds=1.0)
    articles = [_article(1), _article(2), _article(3)]

    result = scraper.fetch_bodies(articles)

    assert result is articles
    assert [c["url"] for c in session.calls] == [a.url for a in articles]
    assert no_sleep == [1.0, 1.0]
    assert articles[0].body == "First paragraph of the story. Second paragraph."
    assert articles[1].body is None
    assert articles[2].body == articles[0].body


def test_fetch_bodies_without_delay_never_sleeps(no_sleep):
    session = FakeSession({"https://example.com/1": FakeResponse(200, text=PAGE)})
    scraper = ArticleScraper(session=session, delay_seconds=0)

    scraper.fetch_bodies([_article(1)])

    assert no_sleep == []
