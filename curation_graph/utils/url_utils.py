"""
URL helpers used by source creation and metadata fetching.
"""
from urllib.parse import urlparse


# Hosts with a public oEmbed endpoint (host suffix -> endpoint)
OEMBED_ENDPOINTS = {
    'youtube.com': 'https://www.youtube.com/oembed',
    'youtu.be': 'https://www.youtube.com/oembed',
    'vimeo.com': 'https://vimeo.com/api/oembed.json',
    'soundcloud.com': 'https://soundcloud.com/oembed',
    'spotify.com': 'https://open.spotify.com/oembed',
    'flickr.com': 'https://www.flickr.com/services/oembed/',
}

VIDEO_HOSTS = {'youtube.com', 'youtu.be', 'vimeo.com', 'tiktok.com', 'twitch.tv'}

SOCIAL_HOSTS = {
    'twitter.com', 'x.com', 'instagram.com', 'facebook.com',
    'linkedin.com', 'threads.net', 'reddit.com', 'bsky.app',
}


def extract_domain(url: str) -> str:
    """Lowercased host without a leading 'www.'; the input itself when it has no host."""
    try:
        host = urlparse(url).netloc.lower()
    except (ValueError, AttributeError):
        return url
    return host.removeprefix('www.') or url


def is_http_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(url)
    except (ValueError, AttributeError):
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def _host_matches(domain: str, hosts) -> bool:
    return any(domain == host or domain.endswith('.' + host) for host in hosts)


def oembed_endpoint(url: str):
    """Return the oEmbed endpoint for a URL, or None if the provider has none."""
    domain = extract_domain(url)
    for host, endpoint in OEMBED_ENDPOINTS.items():
        if _host_matches(domain, [host]):
            return endpoint
    return None


def guess_source_type(url: str) -> str:
    """Guess article/video/social from the host alone."""
    domain = extract_domain(url)
    if _host_matches(domain, VIDEO_HOSTS):
        return 'video'
    if _host_matches(domain, SOCIAL_HOSTS):
        return 'social'
    return 'article'
