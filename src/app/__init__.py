"""
App layer: UI 서버 (FastAPI + Jinja2).

역할:
- 템플릿 CRUD, 업로드, 내보내기, 가져오기 API
- 에디터 / 템플릿 목록 페이지
- 편집 로직 없음 (src/editor, src/render 에 위임)

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML
- src/templates/ → 코드 (store.py)
"""
