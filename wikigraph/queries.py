"""
Read-only views over a frozen wiki graph, used by renderers and health checks.
"""
from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional, Tuple

from .context import MissingLink, WikiContext
from .exceptions import NotFoundError
from .links import wiki_url
from .toc import Toc

if TYPE_CHECKING:
    from .builder import BuiltPage


class WikiQueries:
    """Derived views over a ``WikiContext``: breadcrumbs, sub-pages, reports."""

    def __init__(
        self,
        context: WikiContext,
        pages: Mapping[str, "BuiltPage"],
        index_page_id: str = "index",
    ):
        self.context = context
        self.pages = pages
        self.index_page_id = index_page_id

    def page(self, page_id: str) -> "BuiltPage":
        try:
            return self.pages[page_id]
        except KeyError:
            raise NotFoundError(page_id) from None

    def breadcrumbs(self, page_id: str) -> Tuple[str, ...]:
        """Ancestor ids, root first, excluding the page; always empty for the index page."""
        if page_id == self.index_page_id:
            return ()
        return self.context.get_parent_chain(page_id)

    def sub_pages(self, page_id: str) -> Tuple[str, ...]:
        return self.context.get_sub_pages(page_id)

    def backlinks(self, page_id: str) -> List[str]:
        return sorted(self.context.get_links_to_page(page_id))

    def missing_pages_report(self) -> Tuple[MissingLink, ...]:
        return self.context.get_missing_pages()

    def toc(self, page_id: str) -> Optional[Toc]:
        return self.context.get_non_trivial_toc(page_id)

    def sitemap_urls(self, base_url: str, extra_paths: Iterable[str] = ("/", "/meta")) -> List[str]:
        """Absolute URLs of all published pages, sorted."""
        paths = set(extra_paths)
        paths.update(wiki_url(page_id) for page_id in self.context.get_wiki_page_ids())
        base = base_url.rstrip("/")
        return [f"{base}{path}" for path in sorted(paths)]

    def tree_lines(self, indent: str = "  ") -> List[str]:
        """
        Render the page hierarchy as indented lines.

        Top-level entries are pages without a loaded parent. Each page is
        printed once, so a cyclic hierarchy still terminates.
        """
        lines: List[str] = []
        visited = set()

        def visit(page_id: str, depth: int) -> None:
            if page_id in visited:
                return
            visited.add(page_id)
            lines.append(f"{indent * depth}{page_id}")
            for child in self.context.get_sub_pages(page_id):
                visit(child, depth + 1)

        for page_id in self.context.get_wiki_page_ids():
            parent_id = self.context.get_parent_page(page_id)
            if parent_id is None or not self.context.exists(parent_id):
                visit(page_id, 0)

        return lines
