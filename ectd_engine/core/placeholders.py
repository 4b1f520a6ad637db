"""
Document content for a submission: one-page placeholder PDFs, or copies of
caller-supplied source files.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Union

from fpdf import FPDF

from .errors import EctdErrorCode, create_filesystem_error
from .schemas import Application, Document

logger = logging.getLogger(__name__)


def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


class PlaceholderPDF(FPDF):
    def header(self):
        self.set_font("helvetica", "B", 9)
        self.set_text_color(120, 120, 120)
        self.cell(0, 8, "eCTD 4.0 PLACEHOLDER DOCUMENT", align="R", new_x="LMARGIN", new_y="NEXT")
        self.ln(4)

    def footer(self):
        self.set_y(-15)
        self.set_font("helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, "Generated content - replace before filing", align="C")


def render_placeholder(document: Document, application: Application, sequence_number: int) -> bytes:
    """Render a one-page PDF naming the document and where it belongs."""
    pdf = PlaceholderPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    pdf.set_font("helvetica", "B", 18)
    pdf.set_text_color(0, 51, 102)
    pdf.multi_cell(0, 10, _latin1(document.title), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(6)

    pdf.set_font("helvetica", "", 11)
    pdf.set_text_color(50, 50, 50)
    rows = [
        ("Application", f"{application.type} {application.number}"),
        ("Sponsor", application.sponsor),
        ("Sequence", f"{sequence_number:04d}"),
        ("Module", document.module),
        ("Document type", document.type),
        ("Operation", document.operation),
    ]
    for label, value in rows:
        pdf.cell(45, 8, f"{label}:")
        pdf.cell(0, 8, _latin1(str(value)), new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())


def write_placeholder(
    target: Union[str, Path],
    document: Document,
    application: Application,
    sequence_number: int,
) -> Path:
    path = Path(target)
    content = render_placeholder(document, application, sequence_number)
    try:
        path.write_bytes(content)
    except OSError as exc:
        raise create_filesystem_error(EctdErrorCode.FS_WRITE_FAILED, "write placeholder", str(path), exc) from exc
    logger.debug("Placeholder written", extra={"path": str(path), "bytes": len(content)})
    return path


def copy_source_file(source: Union[str, Path], target: Union[str, Path]) -> Path:
    """Copy a caller-supplied document into the submission tree."""
    src = Path(source)
    dst = Path(target)
    if not src.is_file():
        raise create_filesystem_error(EctdErrorCode.FS_READ_FAILED, "read source document", str(src))
    try:
        shutil.copyfile(src, dst)
    except OSError as exc:
        raise create_filesystem_error(EctdErrorCode.FS_WRITE_FAILED, "copy source document", str(dst), exc) from exc
    return dst
