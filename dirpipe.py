'''dirpipe 실행 래퍼(KR). dirpipe launcher script (EN).'''

from __future__ import annotations

import sys

from cli.dirpipe import main

__all__ = ['main']


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
