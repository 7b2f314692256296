"""
Tesseract OCR via pytesseract.

Tesseract runs as a child process, so even a hard crash of the engine only
shows up here as a ``TesseractError``. Every failure is converted into an
``OCRResult`` status; nothing escapes ``recognize``.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

import pytesseract
from PIL import Image, UnidentifiedImageError

from quiz_extract_ai.config import DEFAULT_TESSDATA_CANDIDATES, OCRConfig
from quiz_extract_ai.ocr.base import OCRProvider, OCRResult, OCRStatus

logger = logging.getLogger(__name__)

# Image modes Tesseract accepts without conversion
_NATIVE_MODES = {"1", "L", "LA", "RGB", "RGBA"}


def resolve_tessdata_dir(
    explicit: Path | str | None = None,
    candidates: Iterable[Path | str] | None = None,
) -> Path | None:
    """
    Find the tessdata directory to hand to Tesseract.

    Args:
        explicit: Configured override, used if it exists.
        candidates: Conventional install locations, checked in order.

    Returns:
        The first existing directory, or None to let Tesseract use its defaults.
    """
    if candidates is None:
        candidates = DEFAULT_TESSDATA_CANDIDATES

    ordered = [explicit] if explicit else []
    ordered.extend(candidates)

    for candidate in ordered:
        path = Path(candidate).expanduser()
        if path.is_dir():
            return path
    return None


class TesseractOCR(OCRProvider):
    """
    OCR adapter backed by the Tesseract engine.

    The image is decoded with Pillow, normalized to PNG in a scratch file and
    passed to Tesseract by path. The scratch file is removed on every exit path.
    """

    def __init__(
        self,
        language: str = "eng",
        tessdata_dir: Path | str | None = None,
        tessdata_candidates: Iterable[Path | str] | None = None,
        page_segmentation_mode: int = 3,
        timeout: int = 60,
        tesseract_cmd: str = "",
    ):
        """
        Initialize Tesseract adapter.

        Args:
            language: Tesseract language code(s), e.g. "eng" or "eng+hin".
            tessdata_dir: Explicit tessdata directory override.
            tessdata_candidates: Ordered fallback locations for tessdata.
            page_segmentation_mode: Tesseract --psm value.
            timeout: Seconds before the engine process is killed (0 = none).
            tesseract_cmd: Path to the tesseract binary if not on PATH. pytesseract
                keeps this in a module global, so it is set again before every
                call; adapters with different binaries must not run concurrently.
        """
        self._language = language
        self._psm = page_segmentation_mode
        self._timeout = timeout
        self._tesseract_cmd = tesseract_cmd
        self._tessdata_dir = resolve_tessdata_dir(tessdata_dir, tessdata_candidates)

        if self._tessdata_dir is None:
            logger.debug("No tessdata directory found, using engine defaults")

    @classmethod
    def from_config(cls, config: OCRConfig) -> TesseractOCR:
        return cls(
            language=config.language,
            tessdata_dir=config.tessdata_dir,
            tessdata_candidates=config.tessdata_candidates,
            page_segmentation_mode=config.page_segmentation_mode,
            timeout=config.timeout_seconds,
            tesseract_cmd=config.tesseract_cmd,
        )

    @property
    def name(self) -> str:
        return "tesseract"

    @property
    def tessdata_dir(self) -> Path | None:
        return self._tessdata_dir

    @property
    def engine_config(self) -> str:
        """Command-line options passed through to Tesseract."""
        parts = [f"--psm {self._psm}"]
        if self._tessdata_dir is not None:
            parts.append(f'--tessdata-dir "{self._tessdata_dir.as_posix()}"')
        return " ".join(parts)

    def recognize(self, image_bytes: bytes) -> OCRResult:
        if not image_bytes:
            return self._result(OCRStatus.INVALID_IMAGE, error="empty image payload")

        try:
            image = self._load_image(image_bytes)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            logger.warning("OCR skipped, image could not be decoded: %s", e)
            return self._result(OCRStatus.INVALID_IMAGE, error=str(e))

        scratch: Path | None = None
        try:
            fd, scratch_name = tempfile.mkstemp(prefix="quiz-ocr-", suffix=".png")
            scratch = Path(scratch_name)
            with os.fdopen(fd, "wb") as handle:
                image.save(handle, format="PNG")

            if self._tesseract_cmd:
                pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
            text = pytesseract.image_to_string(
                str(scratch),
                lang=self._language,
                config=self.engine_config,
                timeout=self._timeout,
            )

        except pytesseract.TesseractNotFoundError as e:
            logger.warning("Tesseract is not installed or not on PATH: %s", e)
            return self._result(OCRStatus.ENGINE_UNAVAILABLE, error=str(e))

        except pytesseract.TesseractError as e:
            message = str(e)
            if "Failed loading language" in message or "tessdata" in message.lower():
                logger.warning("Tesseract language data unavailable: %s", message)
                return self._result(OCRStatus.ENGINE_UNAVAILABLE, error=message)
            logger.warning("Tesseract failed on image: %s", message)
            return self._result(OCRStatus.FAILED, error=message)

        except Exception as e:
            # Timeouts surface as RuntimeError; anything else is an engine fault
            logger.warning("OCR failed: %s: %s", type(e).__name__, e)
            return self._result(OCRStatus.FAILED, error=str(e))

        finally:
            image.close()
            if scratch is not None:
                scratch.unlink(missing_ok=True)

        text = text.strip()
        if not text:
            return self._result(OCRStatus.EMPTY)
        return self._result(OCRStatus.OK, content=text)

    def _load_image(self, image_bytes: bytes) -> Image.Image:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
        if image.mode not in _NATIVE_MODES:
            converted = image.convert("RGB")
            image.close()
            image = converted
        return image

    def _result(self, status: OCRStatus, content: str = "", error: str = "") -> OCRResult:
        metadata = {"language": self._language}
        if error:
            metadata["error"] = error
        return OCRResult(content=content, status=status, engine=self.name, metadata=metadata)


def tesseract_version(tesseract_cmd: str = "") -> str | None:
    """Return the installed Tesseract version, or None if it cannot be run."""
    previous = pytesseract.pytesseract.tesseract_cmd
    if tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
    try:
        return str(pytesseract.get_tesseract_version())
    except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError, OSError):
        return None
    finally:
        pytesseract.pytesseract.tesseract_cmd = previous
