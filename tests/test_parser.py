import io
import unittest

import docx
import fitz

from errors import ExtractionFailure, UnsupportedFormatError
from parser import (
    DOCX_MIME,
    PDF_MIME,
    clean_extracted_text,
    extract_pdf_text,
    extract_text,
    extract_word_text,
)

RESUME_LINES = [
    "Jane Doe - Platform Engineer",
    "Email: jane@example.com",
    "Experience: 6 years building Python services",
    "Skills: Docker, Kubernetes, Terraform",
]


def _make_pdf() -> bytes:
    document = fitz.open()
    page = document.new_page()
    page.insert_text((72, 72), "\n".join(RESUME_LINES), fontsize=11)
    data = document.tobytes()
    document.close()
    return data


def _make_docx() -> io.BytesIO:
    document = docx.Document()
    for line in RESUME_LINES:
        document.add_paragraph(line)
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Certifications"
    table.rows[0].cells[1].text = "AWS Certified"
    buffer = io.BytesIO()
    document.save(buffer)
    buffer.seek(0)
    return buffer


class PdfExtractionTests(unittest.TestCase):
    def test_reads_generated_pdf(self):
        text = extract_pdf_text(io.BytesIO(_make_pdf()))
        self.assertIn("Platform Engineer", text)
        self.assertIn("Terraform", text)

    def test_empty_file(self):
        with self.assertRaises(ExtractionFailure):
            extract_pdf_text(io.BytesIO(b""))

    def test_garbage_bytes(self):
        with self.assertRaises(ExtractionFailure):
            extract_pdf_text(io.BytesIO(b"this is not a pdf document"))


class WordExtractionTests(unittest.TestCase):
    def test_reads_paragraphs_and_tables(self):
        text = extract_word_text(_make_docx())
        self.assertIn("Experience: 6 years building Python services", text)
        self.assertIn("Certifications | AWS Certified", text)

    def test_unreadable_document(self):
        with self.assertRaises(ExtractionFailure):
            extract_word_text(io.BytesIO(b"legacy binary doc"))


class DispatchTests(unittest.TestCase):
    def test_dispatches_on_mime_type(self):
        self.assertIn("Jane Doe", extract_text(_make_docx(), DOCX_MIME))
        self.assertIn("Jane Doe", extract_text(io.BytesIO(_make_pdf()), PDF_MIME))

    def test_unsupported_mime_type(self):
        with self.assertRaises(UnsupportedFormatError) as ctx:
            extract_text(io.BytesIO(b"png"), "image/png")
        self.assertEqual(ctx.exception.mime_type, "image/png")


class CleanTextTests(unittest.TestCase):
    def test_replaces_bullets_and_collapses_blank_lines(self):
        raw = chr(0x2022) + " Led team" + chr(0x2019) + "s rollout   \r\n\r\n\r\n\r\nDone" + chr(0xFB01)
        self.assertEqual(clean_extracted_text(raw), "- Led team's rollout\n\nDonefi")

    def test_empty(self):
        self.assertEqual(clean_extracted_text(""), "")


if __name__ == "__main__":
    unittest.main()
