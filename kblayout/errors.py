# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class FormatErrorReason(str, Enum):
    NOT_ARRAY_OR_OBJECT = "not array/object"
    SYNTAX = "syntax"
    STRUCTURE = "structure"

    def __str__(self) -> str:
        return self.value


class FormatError(Exception):
    """Layout text or document is not an array/object of rows.

    The reason is kept for diagnostics only, callers should treat every
    FormatError as an invalid layout file.
    """

    def __init__(
        self, message: str, reason: FormatErrorReason = FormatErrorReason.STRUCTURE
    ) -> None:
        self.message = message
        self.reason = reason
        logger.error(self.message.replace("\n", " "))
        super().__init__(self.message)
