"""
템플릿 저장소: 주입 가능한 CRUD 인터페이스.

규칙:
- 코어는 구체 저장소를 직접 참조하지 않음 (TemplateStore 주입)
- 트랜잭션/낙관적 동시성 없음: 같은 id 동시 수정은 last-write-wins
- 호출 단위 직렬화: 메모리 저장소 threading.Lock, 파일 저장소 FileLock
- create 는 항상 새 id 발급
- update 는 부분 병합 후 재검증 (id 변경 불가)

구현:
- InMemoryTemplateStore: 서버 기본
- FileTemplateStore: <root>/<template_id>.json
- LocalTemplateStore: 브라우저 localStorage 대응 (고정 키 + current template)
"""

import copy
import json
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.core.ids import new_id
from src.core.serialize import atomic_write_json
from src.domain.constants import CURRENT_TEMPLATE_KEY, DEFAULT_OWNER_ID, STORAGE_KEY
from src.domain.errors import EditorError, ErrorCodes
from src.domain.schemas import Template

logger = logging.getLogger(__name__)

OWNER_KEY = "ownerId"


def merge_template(existing: Template, partial: dict[str, Any]) -> Template:
    """
    부분 업데이트 병합 + 검증. id 는 유지.

    Raises:
        EditorError: VALIDATION_FAILED, DUPLICATE_VARIABLE_ID
    """
    if not isinstance(partial, dict):
        raise EditorError(
            ErrorCodes.VALIDATION_FAILED,
            field="template",
            message="Update payload must be an object",
        )
    merged = {**existing.to_dict(), **partial, "id": existing.id}
    merged.pop(OWNER_KEY, None)
    return Template.from_dict(merged)


# =============================================================================
# Interface
# =============================================================================

class TemplateStore(ABC):
    """템플릿 영속화 인터페이스."""

    @abstractmethod
    def list_templates(self, owner_id: str = DEFAULT_OWNER_ID) -> list[Template]:
        """소유자의 템플릿 목록 (생성 순)."""

    @abstractmethod
    def get(self, template_id: str) -> Template | None:
        """없으면 None."""

    @abstractmethod
    def create(self, template: Template, owner_id: str = DEFAULT_OWNER_ID) -> Template:
        """새 id 를 발급해 저장 후 반환."""

    @abstractmethod
    def update(self, template_id: str, partial: dict[str, Any]) -> Template | None:
        """부분 업데이트. 없으면 None."""

    @abstractmethod
    def delete(self, template_id: str) -> bool:
        """삭제 여부."""


# =============================================================================
# In-memory
# =============================================================================

class InMemoryTemplateStore(TemplateStore):
    """
    메모리 저장소.

    반환값은 복사본: 호출자가 수정해도 저장된 값은 바뀌지 않음.
    """

    def __init__(self) -> None:
        self._templates: dict[str, Template] = {}
        self._owners: dict[str, str] = {}
        self._lock = threading.Lock()

    def list_templates(self, owner_id: str = DEFAULT_OWNER_ID) -> list[Template]:
        with self._lock:
            return [
                copy.deepcopy(t)
                for tid, t in self._templates.items()
                if self._owners.get(tid) == owner_id
            ]

    def get(self, template_id: str) -> Template | None:
        with self._lock:
            template = self._templates.get(template_id)
            return copy.deepcopy(template) if template is not None else None

    def create(self, template: Template, owner_id: str = DEFAULT_OWNER_ID) -> Template:
        stored = copy.deepcopy(template)
        stored.id = new_id()
        with self._lock:
            self._templates[stored.id] = stored
            self._owners[stored.id] = owner_id
        return copy.deepcopy(stored)

    def update(self, template_id: str, partial: dict[str, Any]) -> Template | None:
        with self._lock:
            existing = self._templates.get(template_id)
            if existing is None:
                return None
            updated = merge_template(existing, partial)
            self._templates[template_id] = updated
            return copy.deepcopy(updated)

    def delete(self, template_id: str) -> bool:
        with self._lock:
            self._owners.pop(template_id, None)
            return self._templates.pop(template_id, None) is not None


# =============================================================================
# File
# =============================================================================

class FileTemplateStore(TemplateStore):
    """
    파일 저장소.

    구조:
    <root>/
    ├── <template_id>.json   # Template JSON + ownerId
    └── .locks/<template_id>.lock
    """

    # 락 timeout (초)
    LOCK_TIMEOUT = 10.0

    def __init__(self, root: Path):
        self.root = root
        self._locks_dir = root / ".locks"

    @contextmanager
    def _template_lock(self, template_id: str) -> Generator[None, None, None]:
        """
        템플릿별 락 획득.

        Raises:
            EditorError: STORAGE_LOCK_TIMEOUT
        """
        self._locks_dir.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self._locks_dir / f"{template_id}.lock", timeout=self.LOCK_TIMEOUT)
        try:
            lock.acquire()
        except Timeout as e:
            raise EditorError(
                ErrorCodes.STORAGE_LOCK_TIMEOUT,
                template_id=template_id,
                timeout=self.LOCK_TIMEOUT,
            ) from e
        try:
            yield
        finally:
            lock.release()

    def _path(self, template_id: str) -> Path:
        # id 는 uuid 지만 외부 입력이므로 경로 문자 차단
        if not template_id or any(c in template_id for c in '/\\:') or template_id.startswith("."):
            raise EditorError(
                ErrorCodes.TEMPLATE_NOT_FOUND,
                template_id=template_id,
                message="Invalid template id",
            )
        return self.root / f"{template_id}.json"

    def _read(self, path: Path) -> tuple[Template, str]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read template file {path}: {e}")
            raise EditorError(
                ErrorCodes.STORAGE_FAILED,
                path=str(path),
                error=str(e),
            ) from e
        owner = data.pop(OWNER_KEY, DEFAULT_OWNER_ID)
        return Template.from_dict(data), owner

    def _write(self, template: Template, owner_id: str) -> None:
        atomic_write_json(
            self._path(template.id),
            {**template.to_dict(), OWNER_KEY: owner_id},
        )

    def list_templates(self, owner_id: str = DEFAULT_OWNER_ID) -> list[Template]:
        if not self.root.exists():
            return []

        paths = sorted(self.root.glob("*.json"), key=lambda p: p.stat().st_mtime)
        templates = []
        for path in paths:
            try:
                template, owner = self._read(path)
            except EditorError as e:
                logger.warning(f"Skipping unreadable template {path.name}: {e}")
                continue
            if owner == owner_id:
                templates.append(template)
        return templates

    def get(self, template_id: str) -> Template | None:
        try:
            path = self._path(template_id)
        except EditorError:
            return None
        if not path.exists():
            return None
        return self._read(path)[0]

    def create(self, template: Template, owner_id: str = DEFAULT_OWNER_ID) -> Template:
        stored = copy.deepcopy(template)
        stored.id = new_id()
        with self._template_lock(stored.id):
            self._write(stored, owner_id)
        return stored

    def update(self, template_id: str, partial: dict[str, Any]) -> Template | None:
        try:
            path = self._path(template_id)
        except EditorError:
            return None

        with self._template_lock(template_id):
            if not path.exists():
                return None
            existing, owner = self._read(path)
            updated = merge_template(existing, partial)
            self._write(updated, owner)
            return updated

    def delete(self, template_id: str) -> bool:
        try:
            path = self._path(template_id)
        except EditorError:
            return False

        with self._template_lock(template_id):
            if not path.exists():
                return False
            path.unlink()
            return True


# =============================================================================
# Local (client-side)
# =============================================================================

class LocalTemplateStore:
    """
    클라이언트 측 저장소 (localStorage 대응).

    하나의 JSON 파일을 key-value 로 사용:
    {
      "template-editor-templates": [Template, ...],
      "template-editor-current-template": Template
    }
    """

    LOCK_TIMEOUT = 10.0

    def __init__(self, path: Path):
        self.path = path
        self._lock = FileLock(str(path) + ".lock", timeout=self.LOCK_TIMEOUT)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading local template storage {self.path}: {e}")
            raise EditorError(
                ErrorCodes.STORAGE_FAILED,
                path=str(self.path),
                error=str(e),
            ) from e
        return data if isinstance(data, dict) else {}

    @contextmanager
    def _locked(self) -> Generator[None, None, None]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._lock.acquire()
        except Timeout as e:
            raise EditorError(
                ErrorCodes.STORAGE_LOCK_TIMEOUT,
                path=str(self.path),
                timeout=self.LOCK_TIMEOUT,
            ) from e
        try:
            yield
        finally:
            self._lock.release()

    def save(self, template: Template) -> None:
        """같은 id 가 있으면 교체, 없으면 추가. current template 로도 저장."""
        with self._locked():
            data = self._load()
            items: list[dict[str, Any]] = list(data.get(STORAGE_KEY) or [])
            serialized = template.to_dict()

            for index, item in enumerate(items):
                if isinstance(item, dict) and item.get("id") == template.id:
                    items[index] = serialized
                    break
            else:
                items.append(serialized)

            data[STORAGE_KEY] = items
            data[CURRENT_TEMPLATE_KEY] = serialized
            atomic_write_json(self.path, data)

    def list_templates(self) -> list[Template]:
        """저장된 순서대로. 깨진 항목은 경고 후 건너뜀."""
        templates = []
        for item in self._load().get(STORAGE_KEY) or []:
            try:
                templates.append(Template.from_dict(item))
            except EditorError as e:
                logger.warning(f"Skipping invalid stored template: {e}")
        return templates

    def get(self, template_id: str) -> Template | None:
        for template in self.list_templates():
            if template.id == template_id:
                return template
        return None

    def latest(self) -> Template | None:
        """가장 마지막에 추가된 템플릿."""
        templates = self.list_templates()
        return templates[-1] if templates else None

    def get_current(self) -> Template | None:
        raw = self._load().get(CURRENT_TEMPLATE_KEY)
        if raw is None:
            return None
        return Template.from_dict(raw)

    def delete(self, template_id: str) -> bool:
        with self._locked():
            data = self._load()
            items = list(data.get(STORAGE_KEY) or [])
            remaining = [i for i in items if not (isinstance(i, dict) and i.get("id") == template_id)]
            if len(remaining) == len(items):
                return False
            data[STORAGE_KEY] = remaining
            atomic_write_json(self.path, data)
            return True


def build_store(config: dict[str, Any], base_dir: Path) -> TemplateStore:
    """
    설정(storage 섹션)으로 서버 저장소 생성.

    storage.backend: memory (기본) | file
    storage.path: file 백엔드 디렉터리 (base_dir 기준 상대 경로 허용)
    """
    section = config.get("storage") or {}
    backend = str(section.get("backend", "memory")).lower()

    if backend == "file":
        path = Path(section.get("path", "data/templates"))
        if not path.is_absolute():
            path = base_dir / path
        logger.info(f"Using file template store at {path}")
        return FileTemplateStore(path)

    if backend != "memory":
        logger.warning(f"Unknown storage backend {backend!r}, using memory")
    return InMemoryTemplateStore()
