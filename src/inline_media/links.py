"""Extract link references from chat message text.

Markdown links ([title](url)) are collected first, then bare URLs found
anywhere else in the text. A bare URL that overlaps a markdown link is
part of that link and is not reported again.
"""

import logging
import re
from dataclasses import dataclass
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

MARKDOWN_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

# scheme://..., mailto:..., or www.-prefixed hosts
BARE_URL_PATTERN = re.compile(
    r"(?<![\w@.])"
    r"(?:"
    r"[a-zA-Z][a-zA-Z0-9+.\-]*://[^\s<>\"']+"
    r"|mailto:[^\s<>\"'@]+@[^\s<>\"']+"
    r"|www\.[^\s<>\"']+"
    r")"
)

TRAILING_PUNCTUATION = ".,;:!?'\""
BRACKET_PAIRS = {")": "(", "]": "[", "}": "{"}


@dataclass(frozen=True)
class LinkReference:
    """A link found in message text.

    Attributes:
        url: The link target.
        start: Offset of the first character of the match.
        end: Offset just past the last character of the match.
        title: Display title for markdown links, None for bare URLs.
    """

    url: str
    start: int
    end: int
    title: str | None = None

    @property
    def is_markdown(self) -> bool:
        return self.title is not None

    @property
    def display_title(self) -> str:
        """Title for a preview card: markdown title, then host, then "Link"."""
        if self.title:
            return self.title
        host = urlsplit(self.url).hostname
        return host or "Link"

    def overlaps(self, start: int, end: int) -> bool:
        """Whether the half-open span [start, end) overlaps this link."""
        return self.start < end and start < self.end


def is_valid_url(text: str) -> bool:
    """Check that text is an absolute URL usable for a link preview.

    Stricter than a general URL parser: relative or host-less targets such
    as "/path" or "example" are rejected.

    Args:
        text: Candidate URL.

    Returns:
        True if it has no whitespace, a scheme, and a host (mailto: URLs
        need an address instead).
    """
    if not text or any(ch.isspace() for ch in text):
        return False
    try:
        parts = urlsplit(text)
    except ValueError:
        return False
    if not parts.scheme:
        return False
    if parts.scheme.lower() == "mailto":
        return bool(parts.path)
    return bool(parts.netloc)


def _trim_url(candidate: str) -> str:
    """Drop trailing punctuation and unbalanced closing brackets."""
    while candidate:
        last = candidate[-1]
        if last in TRAILING_PUNCTUATION:
            candidate = candidate[:-1]
        elif last in BRACKET_PAIRS and candidate.count(last) > candidate.count(
            BRACKET_PAIRS[last]
        ):
            candidate = candidate[:-1]
        else:
            break
    return candidate


def _find_bare_urls(text: str) -> list[tuple[str, int, int]]:
    found = []
    for match in BARE_URL_PATTERN.finditer(text):
        candidate = _trim_url(match.group(0))
        start = match.start()
        end = start + len(candidate)
        url = "http://" + candidate if candidate.lower().startswith("www.") else candidate
        if is_valid_url(url):
            found.append((url, start, end))
    return found


def extract_links(text: str) -> list[LinkReference]:
    """Find markdown links and bare URLs in message text.

    Args:
        text: Message text.

    Returns:
        Markdown links in text order, followed by bare URLs in text order
        that do not overlap any markdown link.
    """
    links: list[LinkReference] = []

    for match in MARKDOWN_LINK_PATTERN.finditer(text):
        url = match.group(2)
        if not is_valid_url(url):
            logger.debug("Skipping markdown link with invalid URL: %s", url)
            continue
        links.append(
            LinkReference(
                url=url, start=match.start(), end=match.end(), title=match.group(1)
            )
        )

    markdown_links = list(links)
    for url, start, end in _find_bare_urls(text):
        if any(link.overlaps(start, end) for link in markdown_links):
            continue
        links.append(LinkReference(url=url, start=start, end=end))

    return links


def extract_markdown_link(text: str) -> tuple[str, str] | None:
    """Return (title, url) of the first markdown link, if it is valid.

    Only the first [title](url) match is considered; if its URL is
    invalid the result is None even when later matches are valid.
    """
    match = MARKDOWN_LINK_PATTERN.search(text)
    if not match:
        return None
    title, url = match.group(1), match.group(2)
    if not is_valid_url(url):
        return None
    return title, url
