"""
Render layer: PDF/DOCX/JSON 출력 생성.

역할:
- Template → 내보내기 결과물 (파일명 + 바이트)
- reportlab (PDF), python-docx (Word), json (무손실)
"""

from .base import ExportArtifact, export_filename
from .exporter import export_template, normalize_format
from .json_export import JsonRenderer, render_json
from .pdf import PdfLayout, PdfRenderer, TextPlacement, render_pdf
from .word import DocxRenderer, render_docx

__all__ = [
    "ExportArtifact",
    "export_filename",
    "export_template",
    "normalize_format",
    "render_pdf",
    "render_docx",
    "render_json",
    "PdfRenderer",
    "PdfLayout",
    "TextPlacement",
    "DocxRenderer",
    "JsonRenderer",
]
