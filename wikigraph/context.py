"""
In-memory content graph of the wiki.

The graph is filled once during the build phase and is read-only afterwards:

1. ``WikiBuilder`` records pages, parent links and the facts reported by the
   preprocessors (cross links, quotes, todos, tables of contents).
2. ``freeze()`` ends the build phase. Any later write raises
   ``GraphIntegrityError``.
3. Queries return immutable values (tuples, frozensets), so any number of
   readers can share the frozen graph without locking.

Writes are serialized by a single re-entrant lock. Forward and reverse link
indices are only ever updated together while holding it.
"""
import contextlib
import logging
import threading
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from .exceptions import GraphIntegrityError
from .toc import Toc

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class MissingLink:
    """A recorded link whose target page was never loaded."""
    source_page_id: str
    missing_page_id: str


@dataclass(frozen=True)
class Quote:
    author: str
    text: str


class WikiContext:
    """Content graph: pages, hierarchy, links, quotes, todos and TOCs."""

    def __init__(self):
        self._links_from_page: Dict[str, Set[str]] = {}
        self._links_to_page: Dict[str, Set[str]] = {}
        self._quotes_by_author: Dict[str, List[str]] = {}
        self._todo_pages: Set[str] = set()
        self._all_pages: Set[str] = set()
        # insertion order doubles as child discovery order
        self._parent_page: Dict[str, str] = {}
        self._page_toc: Dict[str, Toc] = {}

        self._lock = threading.RLock()
        self._frozen = False

    # ========================================================================
    # Build phase
    # ========================================================================

    def add_page(self, page_id: str) -> None:
        with self._write_lock():
            self._all_pages.add(page_id)

    def set_parent_page(self, child_page_id: str, parent_page_id: str) -> None:
        if child_page_id == parent_page_id:
            raise GraphIntegrityError(f"Page '{child_page_id}' cannot be its own parent")
        with self._write_lock():
            self._parent_page[child_page_id] = parent_page_id

    def add_link(self, source_page_id: str, target_page_id: str) -> None:
        with self._write_lock():
            self._links_from_page.setdefault(source_page_id, set()).add(target_page_id)
            self._links_to_page.setdefault(target_page_id, set()).add(source_page_id)

    def add_quote(self, author: str, text: str) -> None:
        with self._write_lock():
            quotes = self._quotes_by_author.setdefault(author, [])
            if text not in quotes:
                quotes.append(text)

    def add_todo(self, page_id: str) -> None:
        with self._write_lock():
            self._todo_pages.add(page_id)

    def add_toc(self, page_id: str, toc: Toc) -> None:
        with self._write_lock():
            self._page_toc[page_id] = toc

    def freeze(self) -> None:
        """End the build phase; the graph is read-only from now on."""
        with self._lock:
            self._frozen = True
        logger.info(f"Wiki context frozen: {self.stats()}")

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ========================================================================
    # Queries
    # ========================================================================

    def exists(self, page_id: str) -> bool:
        return page_id in self._all_pages

    def get_wiki_page_ids(self) -> Tuple[str, ...]:
        with self._read_lock():
            return tuple(sorted(self._all_pages))

    def get_links_from_page(self, page_id: str) -> FrozenSet[str]:
        with self._read_lock():
            return frozenset(self._links_from_page.get(page_id, ()))

    def get_links_to_page(self, page_id: str) -> FrozenSet[str]:
        with self._read_lock():
            return frozenset(self._links_to_page.get(page_id, ()))

    def get_sub_pages(self, page_id: str) -> Tuple[str, ...]:
        with self._read_lock():
            return tuple(child for child, parent in self._parent_page.items() if parent == page_id)

    def get_parent_page(self, page_id: str) -> Optional[str]:
        return self._parent_page.get(page_id)

    def get_parent_chain(self, page_id: str) -> Tuple[str, ...]:
        """
        Ancestors of a page, root first, excluding the page itself.

        Args:
            page_id: Page whose ancestors to list

        Returns:
            Tuple of ancestor ids; empty when the page has no recorded parent

        Raises:
            GraphIntegrityError: If the parent chain contains a cycle
        """
        with self._read_lock():
            chain = []
            visited = {page_id}
            current = self._parent_page.get(page_id)

            while current is not None:
                if current in visited:
                    logger.error(f"Parent cycle detected at '{current}' while resolving '{page_id}'")
                    raise GraphIntegrityError(
                        f"Parent chain of '{page_id}' contains a cycle through '{current}'"
                    )
                visited.add(current)
                chain.append(current)
                current = self._parent_page.get(current)

            chain.reverse()
            return tuple(chain)

    def get_missing_pages(self) -> Tuple[MissingLink, ...]:
        with self._read_lock():
            return tuple(sorted(
                MissingLink(source, target)
                for source, targets in self._links_from_page.items()
                for target in targets
                if target not in self._all_pages
            ))

    def get_quotes(self) -> Tuple[Quote, ...]:
        with self._read_lock():
            return tuple(
                Quote(author, text)
                for author in sorted(self._quotes_by_author)
                for text in self._quotes_by_author[author]
            )

    def get_todo_pages(self) -> Tuple[str, ...]:
        with self._read_lock():
            return tuple(sorted(self._todo_pages))

    def get_non_trivial_toc(self, page_id: str) -> Optional[Toc]:
        toc = self._page_toc.get(page_id)
        if toc is None or toc.is_trivial():
            return None
        return toc

    def stats(self) -> Dict[str, int]:
        with self._read_lock():
            return {
                'pages': len(self._all_pages),
                'links': sum(len(targets) for targets in self._links_from_page.values()),
                'missing': len(self.get_missing_pages()),
                'quotes': sum(len(texts) for texts in self._quotes_by_author.values()),
                'todos': len(self._todo_pages),
                'tocs': len(self._page_toc),
            }

    # ========================================================================
    # Locking
    # ========================================================================

    @contextlib.contextmanager
    def _write_lock(self):
        # checked under the lock so no write can overlap freeze()
        with self._lock:
            if self._frozen:
                raise GraphIntegrityError("Wiki context is frozen; no further changes are allowed")
            yield

    def _read_lock(self):
        # a frozen graph never changes, readers skip the lock
        if self._frozen:
            return contextlib.nullcontext()
        return self._lock


class FactBuffer:
    """
    Facts reported by the preprocessors of a single page.

    Preprocessors write here instead of the shared ``WikiContext``; the builder
    commits the buffer only once the whole page was processed, so a failed
    page leaves no trace in the graph.
    """

    def __init__(self):
        self.links: List[Tuple[str, str]] = []
        self.quotes: List[Tuple[str, str]] = []
        self.todos: List[str] = []
        self.tocs: List[Tuple[str, Toc]] = []

    def add_link(self, source_page_id: str, target_page_id: str) -> None:
        self.links.append((source_page_id, target_page_id))

    def add_quote(self, author: str, text: str) -> None:
        self.quotes.append((author, text))

    def add_todo(self, page_id: str) -> None:
        self.todos.append(page_id)

    def add_toc(self, page_id: str, toc: Toc) -> None:
        self.tocs.append((page_id, toc))

    def commit(self, context: WikiContext) -> None:
        for source, target in self.links:
            context.add_link(source, target)
        for author, text in self.quotes:
            context.add_quote(author, text)
        for page_id in self.todos:
            context.add_todo(page_id)
        for page_id, toc in self.tocs:
            context.add_toc(page_id, toc)
