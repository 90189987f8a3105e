# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import List
from unittest.mock import patch

import pytest

from kblayout.model import NormalizedLayout

logger = logging.getLogger(__name__)


class ExitTest(Exception):
    pass


@pytest.fixture
def data_dir(request) -> Path:
    return Path(request.fspath.dirname) / "data"


@pytest.fixture
def cli_isolation(monkeypatch):
    def mock_exit(*args, **kwargs):
        raise ExitTest(*args, **kwargs)

    monkeypatch.setattr("sys.exit", mock_exit)

    @contextmanager
    def _isolation(args: List):
        args.insert(0, "")
        with patch.object(sys, "argv", args):
            yield

    yield _isolation


def positions(layout: NormalizedLayout) -> List[tuple]:
    return [(key.x, key.y) for key in layout.keys]
