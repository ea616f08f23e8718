"""
Application Services.

역할:
- importer: PDF/DOCX/이미지 → 텍스트 또는 배경 이미지
"""

from .importer import ImportResult, import_file, import_path

__all__ = [
    "ImportResult",
    "import_file",
    "import_path",
]
