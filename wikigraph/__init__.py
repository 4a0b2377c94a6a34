"""
Content graph of an interlinked Markdown wiki.

Pages are loaded from a directory, parsed, run through preprocessors that
rewrite wiki links and expand included sources, and collected into a
``WikiContext`` that answers structural queries (breadcrumbs, sub-pages,
missing links, tables of contents).
"""

from .exceptions import (
    WikiGraphError,
    NotFoundError,
    GraphIntegrityError,
    DocumentProcessingError,
    BundleUnavailableError,
    IncludeNotFoundError,
)
from .protocols import Document, BundleEntry, ContentSource, PageSource, ExampleBundle, FactRecorder, Preprocessor
from .toc import Toc, TocEntry
from .context import WikiContext, FactBuffer, MissingLink, Quote
from .sources import DirectoryPageLoader, PageSourceRepository
from .bundle import ZipExampleBundle
from .preprocessors import (
    WikiLinkPreprocessor,
    IncludeSourceCodePreprocessor,
    TocPreprocessor,
    QuotePreprocessor,
    TodoPreprocessor,
    PreprocessingPipeline,
    default_pipeline,
)
from .queries import WikiQueries
from .builder import WikiBuilder, BuildReport, BuiltPage, DocumentResult, build_wiki
from .config import WikiConfig

__all__ = [
    # Exceptions
    "WikiGraphError",
    "NotFoundError",
    "GraphIntegrityError",
    "DocumentProcessingError",
    "BundleUnavailableError",
    "IncludeNotFoundError",
    # Protocols
    "Document",
    "BundleEntry",
    "ContentSource",
    "PageSource",
    "ExampleBundle",
    "FactRecorder",
    "Preprocessor",
    # Graph
    "Toc",
    "TocEntry",
    "WikiContext",
    "FactBuffer",
    "MissingLink",
    "Quote",
    "WikiQueries",
    # Sources
    "DirectoryPageLoader",
    "PageSourceRepository",
    "ZipExampleBundle",
    # Preprocessors
    "WikiLinkPreprocessor",
    "IncludeSourceCodePreprocessor",
    "TocPreprocessor",
    "QuotePreprocessor",
    "TodoPreprocessor",
    "PreprocessingPipeline",
    "default_pipeline",
    # Build
    "WikiBuilder",
    "BuildReport",
    "BuiltPage",
    "DocumentResult",
    "build_wiki",
    "WikiConfig",
]
