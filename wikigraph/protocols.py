"""
Core protocols defining the interfaces between graph building components.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Protocol, Tuple

from .markdown_tree import DocumentNode
from .toc import Toc


@dataclass(frozen=True)
class Document:
    """A wiki page as loaded from the page store."""
    id: Optional[str]            # None only for ad-hoc documents in tests
    source: str
    parent_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class BundleEntry:
    """A single file found in the example source bundle."""
    name: str
    contents: str


class ContentSource(Protocol):
    """Iterator over documents from a data source."""

    def iter_documents(self) -> Iterator[Document]:
        """Yields Document objects."""
        ...


class PageSource(Protocol):
    """Read access to loaded page documents."""

    def get_wiki_page_ids(self) -> Tuple[str, ...]:
        """Returns all known page ids, sorted."""
        ...

    def get_wiki_page_source_by_id(self, page_id: str) -> Document:
        """Returns the document or raises NotFoundError."""
        ...


class ExampleBundle(Protocol):
    """Lookup of example source files by path suffix."""

    def find_by_suffix(self, path: str) -> Optional[BundleEntry]:
        """Returns the first entry whose name ends with ``path``, if any."""
        ...


class FactRecorder(Protocol):
    """Write side of the content graph, as seen by preprocessors."""

    def add_link(self, source_page_id: str, target_page_id: str) -> None: ...

    def add_quote(self, author: str, text: str) -> None: ...

    def add_todo(self, page_id: str) -> None: ...

    def add_toc(self, page_id: str, toc: Toc) -> None: ...


class Preprocessor(Protocol):
    """Inspect and rewrite a parsed page tree, reporting facts to the graph."""

    def preprocess(self, context: FactRecorder, source: Document, root: DocumentNode) -> None:
        """Mutates ``root`` in place and records observed facts on ``context``."""
        ...
