"""
Tests for the metadata fetcher, with HTTP served by httpx.MockTransport.
"""

import httpx
import pytest

from curation_graph.models.source import SourceType
from curation_graph.services.metadata_fetcher import (
    MetadataFetcher,
    SourceMetadata,
    parse_html_metadata,
)
from curation_graph.utils.url_utils import extract_domain, guess_source_type, oembed_endpoint


ARTICLE_HTML = """
<html>
<head>
  <title>Fallback title</title>
  <meta property="og:title" content="Markets rally on rate cut" />
  <meta property="og:description" content="Stocks climbed after the announcement." />
  <meta property="og:image" content="https://news.example.com/img/rally.jpg" />
  <meta property="og:type" content="article" />
  <meta property="article:published_time" content="2024-03-05T09:30:00Z" />
  <script type="application/ld+json">
    {"@type": "NewsArticle", "author": [{"@type": "Person", "name": "Jane Doe"}]}
  </script>
</head>
<body><p>Body</p></body>
</html>
"""


def make_fetcher(handler) -> MetadataFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MetadataFetcher(client=client, timeout=5.0, user_agent='test-agent')


# =============================================================================
# HTML parsing
# =============================================================================

def test_parse_open_graph_article():
    metadata = parse_html_metadata(ARTICLE_HTML, 'https://news.example.com/markets/rally')

    assert metadata.title == 'Markets rally on rate cut'
    assert metadata.description == 'Stocks climbed after the announcement.'
    assert metadata.thumbnail == 'https://news.example.com/img/rally.jpg'
    assert metadata.author == 'Jane Doe'
    assert metadata.published_at == '2024-03-05'
    assert metadata.type == SourceType.ARTICLE


def test_parse_falls_back_to_title_tag_and_meta_author():
    html = """
    <html><head>
      <title> Plain page </title>
      <meta name="author" content="John Roe" />
    </head></html>
    """
    metadata = parse_html_metadata(html, 'https://blog.example.org/post')
    assert metadata.title == 'Plain page'
    assert metadata.author == 'John Roe'
    assert metadata.published_at is None


def test_parse_date_from_url_path():
    metadata = parse_html_metadata('<html></html>', 'https://blog.example.org/2023/12/5/post')
    assert metadata.published_at == '2023-12-05'
    assert metadata.title == 'blog.example.org'


def test_parse_jsonld_graph_date():
    html = """
    <html><head><script type="application/ld+json">
      {"@graph": [{"@type": "WebPage"}, {"@type": "Article", "datePublished": "2022-07-14"}]}
    </script></head></html>
    """
    metadata = parse_html_metadata(html, 'https://example.com/a')
    assert metadata.published_at == '2022-07-14'


def test_parse_ignores_implausible_dates():
    html = '<html><head><meta property="article:published_time" content="1970-01-01" /></head></html>'
    metadata = parse_html_metadata(html, 'https://example.com/a')
    assert metadata.published_at is None


def test_parse_social_host():
    metadata = parse_html_metadata('<html></html>', 'https://x.com/jane/status/1')
    assert metadata.type == SourceType.SOCIAL


def test_parse_video_og_type():
    html = '<html><head><meta property="og:type" content="video.other" /></head></html>'
    metadata = parse_html_metadata(html, 'https://media.example.com/clip')
    assert metadata.type == SourceType.VIDEO


# =============================================================================
# URL helpers
# =============================================================================

def test_url_helpers():
    assert extract_domain('https://www.Example.com/path') == 'example.com'
    assert extract_domain('not a url') == 'not a url'
    assert guess_source_type('https://youtu.be/abc') == 'video'
    assert guess_source_type('https://www.linkedin.com/in/jane') == 'social'
    assert guess_source_type('https://example.com') == 'article'
    assert oembed_endpoint('https://www.youtube.com/watch?v=abc') == 'https://www.youtube.com/oembed'
    assert oembed_endpoint('https://example.com') is None


# =============================================================================
# fetch()
# =============================================================================

@pytest.mark.asyncio
async def test_fetch_article():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=ARTICLE_HTML)

    fetcher = make_fetcher(handler)
    metadata = await fetcher.fetch('https://news.example.com/markets/rally')

    assert metadata.title == 'Markets rally on rate cut'
    assert metadata.author == 'Jane Doe'
    assert len(seen) == 1
    assert seen[0].headers['User-Agent'] == 'test-agent'


@pytest.mark.asyncio
async def test_fetch_merges_oembed():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == '/oembed':
            return httpx.Response(200, json={
                'type': 'video',
                'title': 'Interview with Jane Doe',
                'author_name': 'Acme Channel',
                'thumbnail_url': 'https://i.ytimg.com/vi/abc/hq.jpg',
            })
        return httpx.Response(200, text="""
            <html><head>
              <title>YouTube</title>
              <meta itemprop="datePublished" content="2024-01-20" />
            </head></html>
        """)

    fetcher = make_fetcher(handler)
    metadata = await fetcher.fetch('https://www.youtube.com/watch?v=abc')

    assert metadata.title == 'Interview with Jane Doe'
    assert metadata.author == 'Acme Channel'
    assert metadata.thumbnail == 'https://i.ytimg.com/vi/abc/hq.jpg'
    assert metadata.type == SourceType.VIDEO
    assert metadata.published_at == '2024-01-20'


@pytest.mark.asyncio
async def test_fetch_http_error_returns_fallback():
    fetcher = make_fetcher(lambda request: httpx.Response(404))
    metadata = await fetcher.fetch('https://gone.example.com/page')

    assert metadata == SourceMetadata.fallback('https://gone.example.com/page')
    assert metadata.title == 'gone.example.com'
    assert metadata.type == SourceType.OTHER


@pytest.mark.asyncio
async def test_fetch_network_error_returns_fallback():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = make_fetcher(handler)
    metadata = await fetcher.fetch('https://down.example.com/')

    assert metadata.title == 'down.example.com'
    assert metadata.type == SourceType.OTHER


@pytest.mark.asyncio
async def test_fetch_timeout_returns_fallback():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = make_fetcher(handler)
    metadata = await fetcher.fetch('https://slow.example.com/')
    assert metadata.type == SourceType.OTHER


def test_metadata_to_dict():
    data = SourceMetadata.fallback('https://example.com/x').to_dict()
    assert data == {
        'url': 'https://example.com/x',
        'title': 'example.com',
        'type': 'other',
        'author': None,
        'published_at': None,
        'description': None,
        'thumbnail': None,
    }
