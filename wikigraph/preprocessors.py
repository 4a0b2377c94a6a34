"""
Preprocessing steps run over every parsed page before rendering.

Each preprocessor handles a disjoint set of node kinds:
- WikiLinkPreprocessor: Link nodes pointing to other wiki pages
- IncludeSourceCodePreprocessor: ``include:<lang>`` code blocks
- TocPreprocessor: Heading nodes
- QuotePreprocessor: ``quote:<author>`` code blocks
- TodoPreprocessor: ``todo`` code blocks and paragraphs starting with TODO
"""
import html
import logging
from typing import List, Optional, Sequence

from .exceptions import BundleUnavailableError, IncludeNotFoundError
from .links import WikiLinkNormalizer, is_wiki_link, wiki_url
from .markdown_tree import (
    CodeBlock,
    DocumentNode,
    Heading,
    HtmlBlock,
    Link,
    Node,
    NodeVisitor,
    Paragraph,
    Text,
)
from .protocols import Document, ExampleBundle, FactRecorder, Preprocessor
from .toc import AnchorGenerator, Toc, TocEntry

logger = logging.getLogger(__name__)

INCLUDE_PREFIX = "include:"
QUOTE_PREFIX = "quote:"
TODO_LANGUAGE = "todo"
TODO_MARKER = "TODO"

REPOSITORY_URL = "https://github.com/voho/web"
COVERAGE_URL = "https://codecov.io/gh/voho/web"
BUILD_URL = "https://travis-ci.org/voho/web"
BUILD_BADGE_URL = "https://travis-ci.org/voho/web.svg?branch=master"


class WikiLinkPreprocessor(Preprocessor):
    """Rewrites ``wiki/<id>`` links to public URLs and records them as graph edges."""

    def __init__(self, normalizer: Optional[WikiLinkNormalizer] = None):
        self.normalizer = normalizer or WikiLinkNormalizer()

    def preprocess(self, context: FactRecorder, source: Document, root: DocumentNode) -> None:
        source_id = source.id

        if source_id is None:
            # ad-hoc documents have no page to link from
            return

        def handle_link(link: Link, parent: Node) -> None:
            if not is_wiki_link(link.url):
                return
            target_id, fragment = self.normalizer.split(link.url)
            link.url = wiki_url(target_id, fragment)
            context.add_link(source_id, target_id)

        NodeVisitor({Link: handle_link}).visit(root)


class IncludeSourceCodePreprocessor(Preprocessor):
    """
    Expands ``include:<lang>`` code blocks with files from the example bundle.

    The code block body is a path suffix, e.g.::

        ```include:java
        lz77/LZ77Codeword.java
        ```

    The block is replaced by the highlighted source and attribution links
    (repository view, coverage report, build badge) for the resolved entry.
    """

    def __init__(
        self,
        bundle: Optional[ExampleBundle],
        repository_url: str = REPOSITORY_URL,
        coverage_url: str = COVERAGE_URL,
        build_url: str = BUILD_URL,
        build_badge_url: str = BUILD_BADGE_URL,
    ):
        """
        Args:
            bundle: Example source bundle; None means no bundle is available
            repository_url: Repository base URL for the source view link
            coverage_url: Coverage service base URL for the coverage link
            build_url: Build status page URL
            build_badge_url: Build status badge image URL
        """
        self.bundle = bundle
        self.repository_url = repository_url.rstrip("/")
        self.coverage_url = coverage_url.rstrip("/")
        self.build_url = build_url
        self.build_badge_url = build_badge_url

    def preprocess(self, context: FactRecorder, source: Document, root: DocumentNode) -> None:
        def handle_code_block(block: CodeBlock, parent: Node) -> None:
            if not block.language.startswith(INCLUDE_PREFIX):
                return
            language = block.language[len(INCLUDE_PREFIX):].strip()
            parent.replace_child(block, self.expand(language, block.body.strip()))

        NodeVisitor({CodeBlock: handle_code_block}).visit(root)

    def expand(self, language: str, path: str) -> HtmlBlock:
        if self.bundle is None:
            raise BundleUnavailableError(f"No example bundle configured to include: {path}")

        entry = self.bundle.find_by_suffix(path)
        if entry is None:
            raise IncludeNotFoundError(path)

        logger.debug(f"Including '{entry.name}' as {language}")
        return HtmlBlock(html=self.render(entry.name, language, entry.contents))

    def render(self, entry_name: str, language: str, contents: str) -> str:
        source_url = f"{self.repository_url}/blob/master/{entry_name}"
        coverage_url = f"{self.coverage_url}/src/master/{entry_name}"

        return "\n".join([
            f'<pre><code class="hljs {html.escape(language)}">{html.escape(contents)}</code></pre>',
            '<p class="code-included-disclaimer">'
            f'<a href="{html.escape(source_url)}" target="_blank" rel="noopener">Source code</a> '
            f'<a href="{html.escape(coverage_url)}" target="_blank" rel="noopener">Test coverage</a> '
            f'<a href="{html.escape(self.build_url)}" target="_blank" rel="noopener">'
            f'<img src="{html.escape(self.build_badge_url)}" alt="Build status" /></a>'
            '</p>',
        ])


class TocPreprocessor(Preprocessor):
    """Assigns heading anchors and records the page's table of contents."""

    def preprocess(self, context: FactRecorder, source: Document, root: DocumentNode) -> None:
        anchors = AnchorGenerator()
        entries: List[TocEntry] = []

        def handle_heading(heading: Heading, parent: Node) -> None:
            heading.anchor = anchors.anchor_for(heading.text)
            entries.append(TocEntry(level=heading.level, text=heading.text.strip(), anchor=heading.anchor))

        NodeVisitor({Heading: handle_heading}).visit(root)

        if source.id is not None:
            context.add_toc(source.id, Toc(tuple(entries)))


class QuotePreprocessor(Preprocessor):
    """Records ``quote:<author>`` blocks and renders them as block quotes."""

    def preprocess(self, context: FactRecorder, source: Document, root: DocumentNode) -> None:
        def handle_code_block(block: CodeBlock, parent: Node) -> None:
            if not block.language.startswith(QUOTE_PREFIX):
                return
            author = block.language[len(QUOTE_PREFIX):].strip()
            text = block.body.strip()
            context.add_quote(author, text)
            parent.replace_child(block, HtmlBlock(html=(
                f'<blockquote><p>{html.escape(text)}</p>'
                f'<footer>{html.escape(author)}</footer></blockquote>'
            )))

        NodeVisitor({CodeBlock: handle_code_block}).visit(root)


class TodoPreprocessor(Preprocessor):
    """Flags pages containing outstanding work."""

    def preprocess(self, context: FactRecorder, source: Document, root: DocumentNode) -> None:
        if source.id is None:
            return

        def handle_code_block(block: CodeBlock, parent: Node) -> None:
            if block.language.strip() == TODO_LANGUAGE:
                context.add_todo(source.id)

        def handle_paragraph(paragraph: Paragraph, parent: Node) -> None:
            first = paragraph.children[0] if paragraph.children else None
            if isinstance(first, Text) and first.text.lstrip().startswith(TODO_MARKER):
                context.add_todo(source.id)

        NodeVisitor({CodeBlock: handle_code_block, Paragraph: handle_paragraph}).visit(root)


class PreprocessingPipeline:
    """Runs preprocessors in a fixed order over one page tree."""

    def __init__(self, preprocessors: Sequence[Preprocessor]):
        self.preprocessors = list(preprocessors)

    def run(self, context: FactRecorder, source: Document, root: DocumentNode) -> DocumentNode:
        for preprocessor in self.preprocessors:
            preprocessor.preprocess(context, source, root)
        return root


def default_pipeline(
    bundle: Optional[ExampleBundle] = None,
    repository_url: str = REPOSITORY_URL,
    coverage_url: str = COVERAGE_URL,
    build_url: str = BUILD_URL,
    build_badge_url: str = BUILD_BADGE_URL,
) -> PreprocessingPipeline:
    """Standard pipeline: links, includes, TOC, quotes, todos."""
    return PreprocessingPipeline([
        WikiLinkPreprocessor(),
        IncludeSourceCodePreprocessor(
            bundle,
            repository_url=repository_url,
            coverage_url=coverage_url,
            build_url=build_url,
            build_badge_url=build_badge_url,
        ),
        TocPreprocessor(),
        QuotePreprocessor(),
        TodoPreprocessor(),
    ])
