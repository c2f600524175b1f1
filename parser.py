import io
import logging
import re
from typing import BinaryIO, Callable, Dict, List, Mapping, Optional

import docx
import fitz  # PyMuPDF
from pdfminer.high_level import extract_text as pdfminer_extract_text

from errors import ExtractionFailure, UnsupportedFormatError

PDF_MIME = "application/pdf"
DOC_MIME = "application/msword"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

PDF_TEXT_MIN_LENGTH = 80  # Heuristic threshold to trigger the pdfminer fallback

logger = logging.getLogger(__name__)


def extract_text(
    file_handle: BinaryIO,
    mime_type: str,
    extractors: Optional[Mapping[str, Callable[[BinaryIO], str]]] = None,
) -> str:
    """Extract cleaned text from an uploaded PDF or Word document."""
    extractor = (EXTRACTORS if extractors is None else extractors).get((mime_type or "").lower())
    if extractor is None:
        raise UnsupportedFormatError(mime_type)
    return clean_extracted_text(extractor(file_handle))


def extract_pdf_text(file_handle: BinaryIO) -> str:
    """Attempt PyMuPDF, fall back to pdfminer for sparse or broken layouts."""
    data = file_handle.read()
    if not data:
        raise ExtractionFailure("Failed to extract text from PDF: the file is empty.")

    text = ""
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            text_chunks = [page.get_text("text", sort=True) for page in doc]
        text = "\n".join(text_chunks)
    except Exception as exc:
        logger.warning("PyMuPDF could not read PDF: %s", exc)

    if len(text.strip()) < PDF_TEXT_MIN_LENGTH:
        try:
            alt_text = pdfminer_extract_text(io.BytesIO(data)) or ""
        except Exception as exc:
            logger.warning("pdfminer could not read PDF: %s", exc)
        else:
            if len(alt_text.strip()) > len(text.strip()):
                text = alt_text

    if not text.strip():
        raise ExtractionFailure("Failed to extract text from PDF")
    return text


def extract_word_text(file_handle: BinaryIO) -> str:
    """Read paragraphs and table cells from a Word document.

    Only OOXML packages can be decoded; legacy binary ``.doc`` files surface
    as an extraction failure.
    """
    try:
        document = docx.Document(file_handle)
    except Exception as exc:
        logger.warning("python-docx could not open document: %s", exc)
        raise ExtractionFailure("Failed to extract text from Word document") from exc

    chunks: List[str] = [para.text for para in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                chunks.append(" | ".join(cells))
    return "\n".join(chunks)


EXTRACTORS: Dict[str, Callable[[BinaryIO], str]] = {
    PDF_MIME: extract_pdf_text,
    DOC_MIME: extract_word_text,
    DOCX_MIME: extract_word_text,
}


def clean_extracted_text(text: str) -> str:
    """Normalize whitespace and replace common unicode bullets/dashes."""
    if not text:
        return ""

    char_replacements = {
        "\u2022": "-",
        "\u2023": "-",
        "\u25e6": "-",
        "\u2043": "-",
        "\u2212": "-",
        "\u2013": "-",
        "\u2014": "-",
        "\u2010": "-",
        "\uf0b7": "-",
        "\u2018": "'",
        "\u2019": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\ufb01": "fi",
        "\ufb02": "fl",
        "\u00ad": "",
        "\u00a0": " ",
    }

    cleaned = text.translate(str.maketrans(char_replacements))
    cleaned = re.sub(r"\r\n?", "\n", cleaned)
    cleaned = re.sub(r"[ \t]+\n", "\n", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()
