from __future__ import annotations

from io import BytesIO
from zipfile import BadZipFile, ZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MIME = "application/pdf"
TEXT_MIME = "text/plain"

SUPPORTED_EXTENSIONS = {"docx": DOCX_MIME, "pdf": PDF_MIME, "txt": TEXT_MIME}

ZIP_MAGIC = b"PK\x03\x04"
PDF_MAGIC = b"%PDF-"


class UnsupportedDocumentError(ValueError):
    pass


class ParsedResume(BaseModel):
    text: str
    source_type: str
    mime_type: str
    parsing_warnings: list[str] = Field(default_factory=list)


def extension_of(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def _zip_has_paths(content: bytes, prefix: str) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except BadZipFile:
        return False
    return any(name.startswith(prefix) for name in names)


def _is_probably_text(content: bytes) -> bool:
    if not content:
        return False
    sample = content[:4096]
    if b"\x00" in sample:
        return False
    printable = sum(1 for byte in sample if byte in (9, 10, 13) or 32 <= byte <= 126)
    return (printable / len(sample)) >= 0.75


def validate_upload_signature(*, filename: str, content: bytes) -> str:
    """Check the payload matches its extension and return the extension."""
    ext = extension_of(filename)
    if ext == "doc":
        raise UnsupportedDocumentError("Legacy .doc is not supported. Convert to .docx.")
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedDocumentError("Unsupported file type. Please upload DOCX, PDF or TXT files.")

    if ext == "docx":
        if not content.startswith(ZIP_MAGIC) or not _zip_has_paths(content, "word/"):
            raise UnsupportedDocumentError("File signature does not match .docx content.")
    elif ext == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise UnsupportedDocumentError("File signature does not match .pdf content.")
    elif not _is_probably_text(content):
        raise UnsupportedDocumentError("File signature does not match .txt text content.")
    return ext


def _parse_docx(content: bytes) -> tuple[str, list[str]]:
    try:
        document = Document(BytesIO(content))
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError) as exc:
        return "", [f"DOCX parsing failed: {exc}"]
    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text and cell.text.strip()]
            if cells:
                paragraphs.append(" | ".join(cells))
    warnings = [] if paragraphs else ["No extractable text found in DOCX."]
    return "\n".join(paragraphs), warnings


def _parse_pdf(content: bytes) -> tuple[str, list[str]]:
    try:
        reader = PdfReader(BytesIO(content))
        parts = [(page.extract_text() or "").strip() for page in reader.pages]
    except PdfReadError as exc:
        return "", [f"PDF parsing failed: {exc}"]
    parts = [part for part in parts if part]
    warnings = [] if parts else ["No extractable text found in PDF."]
    return "\n".join(parts), warnings


def extract_resume_text(*, filename: str, content: bytes) -> ParsedResume:
    ext = validate_upload_signature(filename=filename, content=content)
    if ext == "docx":
        text, warnings = _parse_docx(content)
    elif ext == "pdf":
        text, warnings = _parse_pdf(content)
    else:
        text, warnings = content.decode("utf-8", errors="replace"), []
    return ParsedResume(
        text=text.strip(),
        source_type=ext,
        mime_type=SUPPORTED_EXTENSIONS[ext],
        parsing_warnings=warnings,
    )
