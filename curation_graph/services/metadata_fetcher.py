"""
Metadata Fetcher - best-effort preview metadata for a Source URL

Strategy:
1. oEmbed for known providers (YouTube, Vimeo, ...): title, author, thumbnail
2. One HTTP GET of the page, parsed with BeautifulSoup:
   - title: og:title > twitter:title > <title>
   - author: JSON-LD author > meta author > article:author > twitter:creator
   - published_at: JSON-LD date > article:published_time and friends >
     <time datetime> > /YYYY/MM/DD/ in the URL
   - description / thumbnail: Open Graph, then Twitter card
   - type: og:type, then host (video / social / article)
3. oEmbed values win for title/thumbnail/type, page values fill the rest

fetch() never raises. Any failure returns the fallback record
{title: host, type: 'other'} so source creation can proceed.
"""
import json
import logging
import re
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional

import httpx
from bs4 import BeautifulSoup
from dateutil import parser as date_parser

from curation_graph.models.source import SourceType
from curation_graph.utils.url_utils import extract_domain, guess_source_type, oembed_endpoint

logger = logging.getLogger(__name__)


@dataclass
class SourceMetadata:
    """Preview metadata for a URL. Keys mirror Source properties."""
    url: str
    title: str
    type: SourceType = SourceType.ARTICLE
    author: Optional[str] = None
    published_at: Optional[str] = None  # YYYY-MM-DD
    description: Optional[str] = None
    thumbnail: Optional[str] = None

    @classmethod
    def fallback(cls, url: str) -> 'SourceMetadata':
        return cls(url=url, title=extract_domain(url), type=SourceType.OTHER)

    def to_dict(self) -> dict:
        data = asdict(self)
        data['type'] = self.type.value
        return data


DATE_META_KEYS = [
    'article:published_time',
    'publish_date',
    'publication_date',
    'pubdate',
    'date',
    'datePublished',
    'DC.date',
    'parsely-pub-date',
    'sailthru.date',
    'article:modified_time',
    'og:updated_time',
]

JSONLD_DATE_FIELDS = ['datePublished', 'dateCreated', 'uploadDate', 'publishedDate', 'dateModified']

URL_DATE_PATTERN = re.compile(r'/(\d{4})/(\d{1,2})/(\d{1,2})/')


def _normalize_date(value) -> Optional[str]:
    """Parse a free-form date into YYYY-MM-DD. Rejects implausible years."""
    if not value or not isinstance(value, str):
        return None
    try:
        dt = date_parser.parse(value)
    except (ValueError, OverflowError):
        return None
    if dt.year <= 1990 or dt.year > datetime.now().year + 1:
        return None
    return dt.date().isoformat()


def _meta(soup: BeautifulSoup, key: str) -> Optional[str]:
    """Content of <meta property=key> or <meta name=key>."""
    tag = soup.find('meta', attrs={'property': key}) or soup.find('meta', attrs={'name': key})
    if tag and tag.get('content'):
        content = tag['content'].strip()
        return content or None
    return None


def _first_meta(soup: BeautifulSoup, *keys: str) -> Optional[str]:
    for key in keys:
        value = _meta(soup, key)
        if value:
            return value
    return None


def _jsonld_objects(soup: BeautifulSoup):
    """Yield every JSON-LD object on the page, flattening lists and @graph."""
    for script in soup.find_all('script', attrs={'type': 'application/ld+json'}):
        try:
            data = json.loads(script.string or '')
        except (ValueError, TypeError):
            continue

        items = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict):
                continue
            yield item
            graph = item.get('@graph')
            if isinstance(graph, list):
                for node in graph:
                    if isinstance(node, dict):
                        yield node


def _jsonld_author(author) -> Optional[str]:
    if isinstance(author, list):
        author = author[0] if author else None
    if isinstance(author, dict):
        return author.get('name')
    if isinstance(author, str):
        return author
    return None


def parse_html_metadata(html: str, url: str) -> SourceMetadata:
    """Extract SourceMetadata from a fetched page."""
    soup = BeautifulSoup(html, 'lxml')
    metadata = SourceMetadata(url=url, title=extract_domain(url))

    title = _first_meta(soup, 'og:title', 'twitter:title')
    if not title and soup.title and soup.title.string:
        title = soup.title.string.strip()
    if title:
        metadata.title = title

    jsonld = list(_jsonld_objects(soup))

    for item in jsonld:
        author = _jsonld_author(item.get('author'))
        if author:
            metadata.author = author.strip()
            break
    if not metadata.author:
        metadata.author = _first_meta(soup, 'author', 'article:author', 'twitter:creator')

    metadata.published_at = _extract_published_date(soup, jsonld, url)

    metadata.description = _first_meta(soup, 'og:description', 'description', 'twitter:description')
    metadata.thumbnail = _first_meta(soup, 'og:image', 'twitter:image')

    og_type = (_meta(soup, 'og:type') or '').lower()
    if 'video' in og_type:
        metadata.type = SourceType.VIDEO
    else:
        metadata.type = SourceType(guess_source_type(url))

    return metadata


def _extract_published_date(soup: BeautifulSoup, jsonld: list, url: str) -> Optional[str]:
    for item in jsonld:
        for field in JSONLD_DATE_FIELDS:
            date = _normalize_date(item.get(field))
            if date:
                return date

    for key in DATE_META_KEYS:
        date = _normalize_date(_meta(soup, key))
        if date:
            return date

    itemprop = soup.find(attrs={'itemprop': 'datePublished'})
    if itemprop:
        date = _normalize_date(itemprop.get('content') or itemprop.get('datetime'))
        if date:
            return date

    for time_tag in soup.find_all('time', attrs={'datetime': True}):
        date = _normalize_date(time_tag['datetime'])
        if date:
            return date

    match = URL_DATE_PATTERN.search(url)
    if match:
        year, month, day = match.groups()
        return _normalize_date(f"{year}-{int(month):02d}-{int(day):02d}")

    return None


class MetadataFetcher:
    """
    Fetch preview metadata for Source creation.

    Pass an httpx.AsyncClient to share a connection pool (or to inject a
    MockTransport in tests); otherwise one client is opened per fetch.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = None,
        user_agent: str = None,
    ):
        if timeout is None or user_agent is None:
            from curation_graph.config.settings import get_settings
            settings = get_settings()
            timeout = timeout or settings.metadata_timeout
            user_agent = user_agent or settings.metadata_user_agent

        self.client = client
        self.timeout = timeout
        self.user_agent = user_agent

    async def fetch(self, url: str) -> SourceMetadata:
        try:
            if self.client is not None:
                return await self._fetch(self.client, url)
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                return await self._fetch(client, url)
        except httpx.TimeoutException:
            logger.warning(f"⏱️ Timeout fetching metadata for {url}, using fallback")
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning(f"⚠️ Metadata fetch failed for {url}: {e}, using fallback")
        except Exception as e:
            logger.error(f"❌ Unexpected error fetching metadata for {url}: {e}")
        return SourceMetadata.fallback(url)

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> SourceMetadata:
        oembed = await self._fetch_oembed(client, url)

        response = await client.get(url, headers={'User-Agent': self.user_agent})
        if response.status_code != 200:
            if oembed:
                return self._merge(SourceMetadata.fallback(url), oembed)
            raise ValueError(f"HTTP {response.status_code}")

        metadata = parse_html_metadata(response.text, url)
        if oembed:
            metadata = self._merge(metadata, oembed)

        logger.debug(f"Metadata for {url}: {metadata.title!r} ({metadata.type.value})")
        return metadata

    async def _fetch_oembed(self, client: httpx.AsyncClient, url: str) -> Optional[dict]:
        endpoint = oembed_endpoint(url)
        if not endpoint:
            return None
        try:
            response = await client.get(
                endpoint,
                params={'url': url, 'format': 'json'},
                headers={'User-Agent': self.user_agent},
            )
            if response.status_code != 200:
                logger.debug(f"oEmbed HTTP {response.status_code} for {url}")
                return None
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"oEmbed failed for {url}: {e}")
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _merge(metadata: SourceMetadata, oembed: dict) -> SourceMetadata:
        """oEmbed wins for title, thumbnail and type; the page fills the rest."""
        if oembed.get('title'):
            metadata.title = oembed['title']
        if oembed.get('thumbnail_url'):
            metadata.thumbnail = oembed['thumbnail_url']
        if not metadata.author and oembed.get('author_name'):
            metadata.author = oembed['author_name']
        if oembed.get('type') == 'video':
            metadata.type = SourceType.VIDEO
        elif metadata.type == SourceType.OTHER:
            metadata.type = SourceType(guess_source_type(metadata.url))
        return metadata
