'''KR: 테스트 공용 픽스처. EN: Shared pytest fixtures.'''

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tests.fixtures.virtual_fs import create_virtual_tree

REPO_ROOT = Path(__file__).resolve().parent

ECHO_SCRIPT = (
    'import sys\n'
    'for line in sys.stdin:\n'
    '    sys.stdout.write(line)\n'
    '    sys.stdout.flush()\n'
)


@pytest.fixture
def repo_root() -> Path:
    '''저장소 루트를 반환한다(KR). Return the repository root (EN).'''

    return REPO_ROOT


@pytest.fixture
def echo_command() -> list[str]:
    '''입력을 그대로 되돌리는 자식 명령(KR). Child command echoing its stdin (EN).'''

    return [sys.executable, '-c', ECHO_SCRIPT]


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> Path:
    '''임시 워크스페이스를 구성한다(KR). Provision a temporary tree for tests (EN).'''

    ws = tmp_path / 'ws'
    create_virtual_tree(
        ws,
        {
            'a.txt': 'alpha',
            'b/c.txt': 'charlie',
            'b/d/e.txt': 'echo',
        },
    )
    (ws / 'empty' / 'deeper').mkdir(parents=True)
    return ws
