"""
FastAPI Routes.

페이지 라우트 (HTML) + API 라우트 (REST)
"""

from . import export, imports, pages, templates, uploads

__all__ = ["export", "imports", "pages", "templates", "uploads"]
