import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple
from tqdm import tqdm

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r'\n\s*\n')


class DataLoader:
    """Loads local text documents as (document_id, text_blocks) pairs."""

    def __init__(self, config):
        """
        Initialize data loader.

        Args:
            config: Hydra configuration object
        """
        self.config = config
        self.extensions = set(config.indexing.extensions)

    def load_documents(self, paths: Iterable[str]) -> Iterator[Tuple[str, List[str]]]:
        """
        Load every matching file under the given paths.

        Args:
            paths: Files or directories; directories are walked recursively

        Yields:
            Tuples of (document_id, paragraphs)
        """
        files = self._collect_files(paths)
        logger.info(f"Loading {len(files)} documents")

        for path in tqdm(files, desc="Indexing documents", disable=not self.config.indexing.show_progress):
            try:
                text = path.read_text(encoding=self.config.indexing.encoding)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Error reading {path}: {e}")
                continue

            yield (path.as_uri(), self.split_blocks(text))

    def _collect_files(self, paths: Iterable[str]) -> List[Path]:
        files = []
        for raw in paths:
            path = Path(raw).resolve()

            if not path.exists():
                raise FileNotFoundError(f"Input path not found: {path}")

            if path.is_dir():
                files.extend(
                    p for p in sorted(path.rglob('*'))
                    if p.is_file() and p.suffix in self.extensions
                )
            else:
                files.append(path)
        return files

    @staticmethod
    def split_blocks(text: str) -> List[str]:
        """Stripped paragraphs separated by blank lines, empty ones dropped."""
        return [block.strip() for block in PARAGRAPH_BREAK.split(text) if block.strip()]
