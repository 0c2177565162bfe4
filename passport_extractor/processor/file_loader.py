import mimetypes
from pathlib import Path

from passport_extractor.processor.models import RawUpload

# Missing from the mimetypes table on some platforms.
_EXTRA_TYPES = {".webp": "image/webp"}


def guess_media_type(path: Path) -> str:
    """Guess the media type from the file extension."""
    extra = _EXTRA_TYPES.get(path.suffix.lower())
    if extra is not None:
        return extra
    media_type, _ = mimetypes.guess_type(path.name)
    return media_type or "application/octet-stream"


class FileLoader:
    """Reads a local file into a RawUpload."""

    def load(self, path: Path, media_type: str | None = None) -> RawUpload:
        """Read file bytes from disk into a zeroable buffer.

        Raises:
            FileNotFoundError: if the file does not exist.
        """
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return RawUpload(
            data=bytearray(path.read_bytes()),
            media_type=media_type or guess_media_type(path),
            filename=path.name,
        )
