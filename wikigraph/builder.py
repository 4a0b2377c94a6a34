"""
Build phase: turns the page store into a frozen content graph.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional

from tqdm import tqdm

from .context import FactBuffer, WikiContext
from .exceptions import DocumentProcessingError, GraphIntegrityError
from .markdown_tree import DocumentNode, parse_markdown
from .preprocessors import PreprocessingPipeline, default_pipeline
from .protocols import Document, PageSource
from .queries import WikiQueries

logger = logging.getLogger(__name__)

INDEX_PAGE_ID = "index"


@dataclass
class BuiltPage:
    """A successfully preprocessed page, ready for rendering."""
    document: Document
    tree: DocumentNode


@dataclass
class DocumentResult:
    """
    Outcome of processing one page; exactly one of page/error is set.

    ``facts`` holds the staged facts until the builder commits them.
    """
    page_id: str
    page: Optional[BuiltPage] = None
    facts: Optional[FactBuffer] = None
    error: Optional[DocumentProcessingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BuildReport:
    context: WikiContext
    queries: WikiQueries
    results: List[DocumentResult] = field(default_factory=list)

    @property
    def built_page_ids(self) -> List[str]:
        return [result.page_id for result in self.results if result.ok]

    @property
    def failed(self) -> List[DocumentResult]:
        return [result for result in self.results if not result.ok]


class WikiBuilder:
    """
    Builds the wiki content graph from a page store.

    The build runs in two steps:
    1. Every page is parsed and preprocessed (optionally on a thread pool).
       Facts are staged per page in a ``FactBuffer``.
    2. Results are committed to the shared ``WikiContext`` in page id order.
       Failed pages are logged and skipped; they are absent from the graph.

    The context is frozen once all pages are committed.
    """

    def __init__(
        self,
        repository: PageSource,
        pipeline: Optional[PreprocessingPipeline] = None,
        index_page_id: str = INDEX_PAGE_ID,
        workers: int = 1,
        show_progress: bool = True,
    ):
        """
        Args:
            repository: Page store providing the documents
            pipeline: Preprocessors to run on every page (defaults to the
                      standard pipeline without an example bundle)
            index_page_id: Id of the root page
            workers: Number of threads used to process pages
            show_progress: Show progress bars via tqdm
        """
        self.repository = repository
        self.pipeline = pipeline or default_pipeline()
        self.index_page_id = index_page_id
        self.workers = workers
        self.show_progress = show_progress

    def build(self) -> BuildReport:
        page_ids = self.repository.get_wiki_page_ids()
        logger.info(f"Building wiki graph from {len(page_ids)} pages...")

        if self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                results = list(tqdm(
                    executor.map(self.process_document, page_ids),
                    total=len(page_ids),
                    disable=not self.show_progress,
                    desc="Processing pages",
                    unit="pages",
                ))
        else:
            results = [
                self.process_document(page_id)
                for page_id in tqdm(
                    page_ids,
                    disable=not self.show_progress,
                    desc="Processing pages",
                    unit="pages",
                )
            ]

        context = WikiContext()
        pages: Dict[str, BuiltPage] = {}

        for result in results:
            if not result.ok:
                continue
            self._commit(context, result)
            # committed facts live on in the context only
            result.facts = None
            pages[result.page_id] = result.page

        context.freeze()

        failed = len(results) - len(pages)
        logger.info(f"Wiki graph complete: {len(pages)} pages built, {failed} failed")

        queries = WikiQueries(context, MappingProxyType(pages), index_page_id=self.index_page_id)
        return BuildReport(context=context, queries=queries, results=results)

    def process_document(self, page_id: str) -> DocumentResult:
        """
        Parse and preprocess a single page.

        Any failure is returned as a ``DocumentProcessingError`` in the result
        rather than raised, so the build can continue with the other pages.
        """
        try:
            document = self.repository.get_wiki_page_source_by_id(page_id)
            if document.parent_id == page_id:
                raise GraphIntegrityError(f"Page '{page_id}' cannot be its own parent")
            tree = parse_markdown(document.source)
            facts = FactBuffer()
            self.pipeline.run(facts, document, tree)
        except Exception as e:
            error = DocumentProcessingError(page_id, e)
            logger.error(f"Cannot process page '{page_id}': {e}", exc_info=True)
            return DocumentResult(page_id=page_id, error=error)

        return DocumentResult(page_id=page_id, page=BuiltPage(document, tree), facts=facts)

    def _commit(self, context: WikiContext, result: DocumentResult) -> None:
        document = result.page.document
        context.add_page(result.page_id)
        if document.parent_id is not None:
            context.set_parent_page(result.page_id, document.parent_id)
        result.facts.commit(context)


def build_wiki(
    repository: PageSource,
    pipeline: Optional[PreprocessingPipeline] = None,
    **builder_kwargs,
) -> BuildReport:
    """Convenience wrapper around ``WikiBuilder(...).build()``."""
    return WikiBuilder(repository, pipeline, **builder_kwargs).build()
