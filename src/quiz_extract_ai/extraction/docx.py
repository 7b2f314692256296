"""
Text extraction for DOCX files.

Uses python-docx to read paragraphs and tables directly. Pictures embedded
in the document are passed through the OCR adapter and their text appended
after the body, so questions typed into screenshots are not lost.
"""

from __future__ import annotations

import asyncio
import io
import logging

from docx import Document
from docx.document import Document as DocxDocument
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from quiz_extract_ai.errors import DocumentDecodeError
from quiz_extract_ai.extraction.base import DocumentExtractor
from quiz_extract_ai.ocr import OCRProvider, OCRStatus

logger = logging.getLogger(__name__)

IMAGE_TEXT_MARKER = "[Image Text Content]:"

# Legacy VML pictures (<w:pict><v:imagedata r:id=...>); "v" is not in python-docx's nsmap
_VML_IMAGEDATA = "{urn:schemas-microsoft-com:vml}imagedata"


class DocxExtractor(DocumentExtractor):
    """
    Extract text from DOCX files using python-docx.

    Body text comes first, in document order. OCR text from embedded
    pictures follows, one delimited block per picture that yielded text.
    Pictures are collected from the body and then from section headers and
    footers, both DrawingML and legacy VML. Linked (external) pictures are
    not fetched. A failing picture never affects the body text or the other
    pictures.
    """

    SUPPORTED_EXTENSIONS = frozenset({".docx"})

    def __init__(self, ocr: OCRProvider | None = None, max_concurrent_images: int = 1):
        """
        Initialize DOCX extractor.

        Args:
            ocr: OCR adapter for embedded pictures. None skips picture OCR.
            max_concurrent_images: Pictures recognized in parallel (1 = sequential).
        """
        self._ocr = ocr
        self._max_concurrent_images = max(1, max_concurrent_images)

    @property
    def name(self) -> str:
        return "docx_direct"

    async def extract(self, data: bytes, filename: str) -> str:
        try:
            doc = Document(io.BytesIO(data))
        except Exception as e:
            raise DocumentDecodeError(filename, str(e)) from e

        body = self._extract_body(doc)
        images = self._embedded_images(doc)
        if not images:
            return body

        image_texts = await self._recognize_images(images, filename)
        blocks = [body] if body else []
        blocks.extend(f"{IMAGE_TEXT_MARKER}\n{text}" for text in image_texts if text)
        return "\n\n".join(blocks)

    def _table_to_markdown(self, table: Table) -> str:
        """Convert a DOCX table to markdown format."""
        rows = []
        for row in table.rows:
            cells = [cell.text.strip().replace("\n", " ") for cell in row.cells]
            rows.append("| " + " | ".join(cells) + " |")

        if len(rows) >= 1:
            # Add header separator after first row
            num_cols = len(table.rows[0].cells) if table.rows else 0
            separator = "| " + " | ".join(["---"] * num_cols) + " |"
            rows.insert(1, separator)

        return "\n".join(rows)

    def _extract_body(self, doc: DocxDocument) -> str:
        """Paragraph text and tables, in document order."""
        parts: list[str] = []
        for item in doc.iter_inner_content():
            if isinstance(item, Paragraph):
                parts.append(item.text)
            elif isinstance(item, Table):
                parts.append(self._table_to_markdown(item))
        return "\n".join(parts).strip()

    def _embedded_images(self, doc: DocxDocument) -> list[bytes]:
        """Blobs of embedded pictures in document order, each picture once."""
        seen: set[str] = set()
        blobs: list[bytes] = []

        stories = [(doc.part, doc.element.body)]
        for section in doc.sections:
            for header_footer in (
                section.header,
                section.first_page_header,
                section.even_page_header,
                section.footer,
                section.first_page_footer,
                section.even_page_footer,
            ):
                # Linked ones reuse an earlier section's part; asking for it would add one
                if header_footer.is_linked_to_previous:
                    continue
                part = header_footer.part
                stories.append((part, part.element))

        for story_part, element in stories:
            related = story_part.related_parts
            for node in element.iter(qn("a:blip"), _VML_IMAGEDATA):
                attr = qn("r:embed") if node.tag == qn("a:blip") else qn("r:id")
                r_id = node.get(attr)
                if not r_id:
                    continue
                part = related.get(r_id)
                # Linked (external) pictures have no part in the package
                if part is None or str(part.partname) in seen:
                    continue
                seen.add(str(part.partname))
                blobs.append(part.blob)

        return blobs

    async def _recognize_images(self, images: list[bytes], filename: str) -> list[str]:
        """OCR each picture, isolating failures and stopping if the engine is gone."""
        if self._ocr is None:
            return []

        ocr = self._ocr
        semaphore = asyncio.Semaphore(self._max_concurrent_images)
        engine_down = False

        async def recognize(index: int, blob: bytes) -> str:
            nonlocal engine_down
            async with semaphore:
                if engine_down:
                    return ""
                try:
                    result = await asyncio.to_thread(ocr.recognize, blob)
                except Exception as e:
                    logger.warning("OCR crashed on picture %d of %s: %s", index + 1, filename, e)
                    return ""

            if result.engine_unavailable:
                if not engine_down:
                    logger.warning(
                        "OCR engine unavailable, skipping remaining pictures in %s", filename
                    )
                engine_down = True
                return ""

            if result.status in (OCRStatus.FAILED, OCRStatus.INVALID_IMAGE):
                logger.info(
                    "Skipping picture %d of %s (%s)", index + 1, filename, result.status.value
                )
            return result.content.strip()

        texts = await asyncio.gather(*(recognize(i, blob) for i, blob in enumerate(images)))
        logger.debug(
            "Recognized text in %d of %d pictures in %s",
            sum(1 for t in texts if t),
            len(images),
            filename,
        )
        return list(texts)
