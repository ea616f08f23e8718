"""
Editor layer: 템플릿 편집 상태 머신과 세션.

역할:
- state: 선택 / 편집 / 드래그 / 모달 / 전체 삭제 확인
- session: 저장 / 불러오기 / 내보내기 / 가져오기 + 알림
"""

from .session import EditorSession
from .state import EditorMode, EditorState, ModalDraft, ModalKind, Notification

__all__ = [
    "EditorMode",
    "EditorSession",
    "EditorState",
    "ModalDraft",
    "ModalKind",
    "Notification",
]
