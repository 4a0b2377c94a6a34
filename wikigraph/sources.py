"""
Page store implementations.

- DirectoryPageLoader: Reads Markdown page files from a directory tree
- PageSourceRepository: Immutable id -> Document mapping used by the builder
"""
import logging
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Tuple

from .exceptions import NotFoundError
from .protocols import ContentSource, Document

logger = logging.getLogger(__name__)

REPOSITORY_PAGES_URL = "https://github.com/voho/web/blob/master/website/src/main/resources/wiki"
RAW_PAGES_URL = "https://raw.githubusercontent.com/voho/web/master/website/src/main/resources/wiki"


class DirectoryPageLoader(ContentSource):
    """
    Reads wiki pages from a directory of Markdown files.

    The page id is the file name without extension. The parent id is the name
    of the directory directly containing the file, so ``algorithms/sorting.md``
    is a child of the ``algorithms`` page; files at the top level have no parent.
    """

    def __init__(
        self,
        pages_dir: Path,
        extension: str = '.md',
        repository_url: str = REPOSITORY_PAGES_URL,
        raw_url: str = RAW_PAGES_URL,
    ):
        """
        Args:
            pages_dir: Root directory of the page files
            extension: File extension of page files
            repository_url: Base URL of the page sources in the repository
            raw_url: Base URL of the raw page sources
        """
        self.pages_dir = Path(pages_dir)
        self.extension = extension if extension.startswith('.') else f'.{extension}'
        self.repository_url = repository_url.rstrip('/')
        self.raw_url = raw_url.rstrip('/')

        if not self.pages_dir.is_dir():
            raise ValueError(f"Pages directory does not exist: {self.pages_dir}")

    def iter_documents(self) -> Iterator[Document]:
        for filepath in sorted(self.pages_dir.rglob(f'*{self.extension}')):
            relative = filepath.relative_to(self.pages_dir)
            logger.debug(f"Processing resource: {relative}")

            try:
                content = filepath.read_text(encoding='utf-8')
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Cannot read page file {filepath}: {e}")
                continue

            parent_id = relative.parent.name if len(relative.parts) > 1 else None

            yield Document(
                id=filepath.stem,
                parent_id=parent_id,
                # trailing blank line terminates any block left open by the source
                source=content + "\n\n",
                metadata={
                    'filepath': str(filepath),
                    'origin': f"LOCAL {relative.as_posix()} @ {datetime.now().isoformat()}",
                    'github_url': f"{self.repository_url}/{relative.as_posix()}",
                    'github_raw_url': f"{self.raw_url}/{relative.as_posix()}",
                },
            )


class PageSourceRepository:
    """
    Immutable page store, populated once at startup.

    Duplicate ids keep the first document seen; later ones are logged and
    dropped.
    """

    def __init__(self, documents: Iterable[Document]):
        pages: Dict[str, Document] = {}

        for document in documents:
            if document.id is None:
                raise ValueError("Stored documents must have an id")
            if document.id in pages:
                logger.warning(
                    f"Duplicate page id '{document.id}' "
                    f"({document.metadata.get('filepath', '?')}), keeping the first one"
                )
                continue
            pages[document.id] = document

        self._pages: Mapping[str, Document] = MappingProxyType(pages)
        logger.info(f"Loaded pages: {len(self._pages)}")

    @classmethod
    def from_directory(cls, pages_dir: Path, **loader_kwargs) -> 'PageSourceRepository':
        return cls(DirectoryPageLoader(pages_dir, **loader_kwargs).iter_documents())

    def get_wiki_page_ids(self) -> Tuple[str, ...]:
        return tuple(sorted(self._pages))

    def get_wiki_page_source_by_id(self, page_id: str) -> Document:
        try:
            return self._pages[page_id]
        except KeyError:
            raise NotFoundError(page_id) from None

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._pages
