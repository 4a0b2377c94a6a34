"""
Wiki build configuration.

One ``WikiConfig`` drives the page store, the example bundle, the
preprocessing pipeline and the builder. It can be saved next to a content
directory as JSON and loaded back by the CLI.
"""
import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import List, Optional

from .bundle import ZipExampleBundle
from .preprocessors import (
    BUILD_BADGE_URL,
    BUILD_URL,
    COVERAGE_URL,
    REPOSITORY_URL,
    PreprocessingPipeline,
    default_pipeline,
)

logger = logging.getLogger(__name__)

PATH_FIELDS = ('pages_dir', 'bundle_path', 'bundle_fallback_paths')


@dataclass
class WikiConfig:
    """
    Configuration of a wiki build.

    Attributes:
        pages_dir: Directory with the Markdown page files
        index_page_id: Id of the root page (empty breadcrumbs)
        bundle_path: Preferred location of the example source ZIP
        bundle_fallback_paths: Locations tried when ``bundle_path`` is missing
        repository_url: Repository base URL for included source links
        coverage_url: Coverage service base URL for included source links
        build_url: Build status page URL
        build_badge_url: Build status badge image URL
        base_url: Public site URL, used for sitemaps
        workers: Threads used to process pages during the build
        show_progress: Show tqdm progress bars
    """

    pages_dir: Optional[Path] = None
    index_page_id: str = "index"
    bundle_path: Optional[Path] = Path("/tmp/examples.zip")
    bundle_fallback_paths: List[Path] = field(
        default_factory=lambda: [Path("../examples/target/examples.zip")]
    )
    repository_url: str = REPOSITORY_URL
    coverage_url: str = COVERAGE_URL
    build_url: str = BUILD_URL
    build_badge_url: str = BUILD_BADGE_URL
    base_url: str = "http://voho.eu"
    workers: int = 1
    show_progress: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if not self.index_page_id:
            raise ValueError("index_page_id must not be empty")

        if self.pages_dir is not None:
            self.pages_dir = Path(self.pages_dir)
        if self.bundle_path is not None:
            self.bundle_path = Path(self.bundle_path)
        self.bundle_fallback_paths = [Path(p) for p in self.bundle_fallback_paths]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        for name in PATH_FIELDS:
            value = data[name]
            if isinstance(value, list):
                data[name] = [str(p) for p in value]
            elif value is not None:
                data[name] = str(value)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'WikiConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def save(self, path: Path) -> None:
        """Save configuration to JSON file."""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> 'WikiConfig':
        """Load configuration from JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def get_bundle(self) -> ZipExampleBundle:
        candidates = [self.bundle_path] if self.bundle_path is not None else []
        return ZipExampleBundle(candidates + list(self.bundle_fallback_paths))

    def get_pipeline(self) -> PreprocessingPipeline:
        return default_pipeline(
            self.get_bundle(),
            repository_url=self.repository_url,
            coverage_url=self.coverage_url,
            build_url=self.build_url,
            build_badge_url=self.build_badge_url,
        )
