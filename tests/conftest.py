from __future__ import annotations

import io
import json
import sys
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from hskdeck.terminal import Terminal  # noqa: E402


class RecordingTerminal(Terminal):
    """Terminal writing to memory, fed by a scripted key sequence."""

    def __init__(self, keys: Iterable[str], size: tuple[int, int] = (80, 24)) -> None:
        self.out = io.StringIO()
        self.cards: list[tuple[str, str, bool]] = []
        self.events: list[str] = []
        self.size_value = size
        super().__init__(
            stdin=io.StringIO(),
            stdout=self.out,
            size_fn=lambda: self.size_value,
            read_key_fn=iter(keys).__next__,
        )

    def acquire(self) -> None:
        if not self.active:
            self.events.append("acquire")
        super().acquire()

    def release(self) -> None:
        if self.active:
            self.events.append("release")
        super().release()

    def render_card(self, header: str, body: str) -> None:
        self.cards.append((header, body, self.active))
        super().render_card(header, body)


def sample_document() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "missions": [
                {
                    "id": 1,
                    "terms": [
                        {"pinyin": "lǚxíng", "hanzi": "旅行", "saved": False},
                        {"pinyin": "nǐ hǎo", "hanzi": "你好", "saved": True},
                    ],
                },
                {"id": 2, "terms": []},
            ],
        },
        {
            "id": 2,
            "missions": [
                {
                    "id": 1,
                    "terms": [
                        {"pinyin": "xuéxí", "hanzi": "学习", "saved": False},
                        {"pinyin": "lǎoshī", "hanzi": "老师", "saved": True},
                        {"pinyin": "péngyou", "hanzi": "朋友"},
                    ],
                }
            ],
        },
    ]


@pytest.fixture
def document() -> list[dict[str, Any]]:
    return sample_document()


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[[Any], Path]:
    def _write(payload: Any, name: str = "practice_sheet.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_terminal() -> Callable[..., RecordingTerminal]:
    return RecordingTerminal
