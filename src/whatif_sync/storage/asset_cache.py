"""Filesystem cache of offline article documents and images.

Directory structure:
    {root}/
    └── what if/
        ├── {number}/
        │   ├── {number}.html
        │   ├── 1.png
        │   └── ...
        └── overview/
            ├── 1.png
            └── ...
"""

import io
import logging
import os
import shutil
import tempfile
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .exceptions import ArticleUnavailableError, DecodeError

logger = logging.getLogger(__name__)

WHATIF_DIR = "what if"
OVERVIEW_DIR = "overview"


def encode_png(data: bytes) -> bytes:
    """Decode image bytes and re-encode them as lossless PNG.

    Raises:
        DecodeError: If the bytes are not a decodable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            if image.mode not in ("1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16"):
                image = image.convert("RGBA")
            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Cannot decode image: {e}") from e
    return buffer.getvalue()


class AssetCache:
    """Stores offline copies addressed by article number and asset index.

    Every write goes to a temporary file in the target directory and is then
    renamed into place, so an interrupted download never leaves a truncated
    file under its final name.
    """

    def __init__(self, root: Path):
        self.root = Path(root).expanduser().absolute()

    @property
    def base_dir(self) -> Path:
        return self.root / WHATIF_DIR

    @property
    def overview_dir(self) -> Path:
        return self.base_dir / OVERVIEW_DIR

    def article_dir(self, number: int) -> Path:
        return self.base_dir / str(number)

    def document_path(self, number: int) -> Path:
        return self.article_dir(number) / f"{number}.html"

    def image_path(self, number: int, index: int) -> Path:
        return self.article_dir(number) / f"{index}.png"

    def overview_image_path(self, index: int) -> Path:
        return self.overview_dir / f"{index}.png"

    def has_document(self, number: int) -> bool:
        return self.document_path(number).is_file()

    def store_document(self, number: int, markup: str) -> Path:
        path = self.document_path(number)
        self._write_atomic(path, markup.encode("utf-8"))
        logger.debug(f"Stored document for article {number} at {path}")
        return path

    def read_document(self, number: int) -> str:
        """Read the cached document of an article.

        Raises:
            ArticleUnavailableError: If the document is missing or unreadable
        """
        path = self.document_path(number)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise ArticleUnavailableError(
                number, f"Cannot read offline document {path}: {e}"
            ) from e

    def store_image(self, number: int, index: int, data: bytes) -> Path:
        """Decode, re-encode as PNG and store an article illustration.

        Raises:
            DecodeError: If the bytes are not a decodable image
        """
        path = self.image_path(number, index)
        self._write_atomic(path, encode_png(data))
        return path

    def store_overview_image(self, index: int, data: bytes) -> Path:
        path = self.overview_image_path(index)
        self._write_atomic(path, encode_png(data))
        return path

    def delete_all(self) -> None:
        """Remove every offline article and overview image."""
        if self.base_dir.exists():
            shutil.rmtree(self.base_dir)
            logger.info(f"Deleted offline articles at {self.base_dir}")

    def _write_atomic(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
