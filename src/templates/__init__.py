"""
Templates layer: 템플릿 영속화 모듈.

역할:
- 서버 저장소 인터페이스 + 구현 (store.py)
- 클라이언트 측(localStorage 대응) 저장소

주의: 폴더 구분
- src/templates/ → 코드 (이 모듈)
- src/app/templates/ → UI (Jinja2 HTML)
"""

from .store import (
    FileTemplateStore,
    InMemoryTemplateStore,
    LocalTemplateStore,
    TemplateStore,
    build_store,
    merge_template,
)

__all__ = [
    "TemplateStore",
    "InMemoryTemplateStore",
    "FileTemplateStore",
    "LocalTemplateStore",
    "build_store",
    "merge_template",
]
