"""
Wiki link conventions.

Internal links are written in page sources as ``[text](wiki/<page-id>)``,
optionally with surrounding slashes or an in-page fragment
(``wiki/<page-id>/#section``). They are published under ``/wiki/<page-id>/``.
"""
from typing import Optional, Tuple
from urllib.parse import unquote

WIKI_PREFIX = "wiki/"


def is_wiki_link(url: str) -> bool:
    return url.startswith(WIKI_PREFIX)


def strip_slashes(value: str) -> str:
    return value.strip("/")


def strip_wiki_prefix(value: str) -> str:
    if value.startswith(WIKI_PREFIX):
        return value[len(WIKI_PREFIX):]
    return value


def wiki_url(page_id: str, fragment: Optional[str] = None) -> str:
    """Canonical public URL of a wiki page."""
    url = f"/{WIKI_PREFIX}{page_id}/"
    if fragment:
        url += f"#{fragment}"
    return url


class WikiLinkNormalizer:
    """
    Turns raw wiki link targets into page ids.

    Examples:
        >>> normalizer = WikiLinkNormalizer()
        >>> normalizer.normalize("wiki/quick-sort/")
        'quick-sort'
        >>> normalizer.split("wiki/quick-sort#complexity")
        ('quick-sort', 'complexity')
    """

    def normalize(self, link: str) -> str:
        return self.split(link)[0]

    def split(self, link: str) -> Tuple[str, Optional[str]]:
        """
        Split a raw link into page id and optional fragment.

        Args:
            link: Raw link target starting with the wiki prefix

        Returns:
            Tuple of (page id, fragment or None)
        """
        # the Markdown parser percent-encodes non-ASCII targets
        target, _, fragment = unquote(link).partition("#")
        page_id = strip_slashes(strip_wiki_prefix(strip_slashes(target)))
        return page_id, fragment or None
