# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
from logging import NullHandler

__version__ = "0.1.0"
__license__ = "GPL-3.0-or-later"

logging.getLogger(__name__).addHandler(NullHandler())
del NullHandler

from .errors import FormatError, FormatErrorReason  # noqa: E402
from .kle_export import to_kle, to_kle_rows, to_via  # noqa: E402
from .kle_parser import (  # noqa: E402
    from_via,
    interpret_document,
    parse_layout,
    parse_layout_file,
)
from .model import Key, LayoutMetadata, LayoutOption, NormalizedLayout  # noqa: E402
from .options import HomingNubType, ParseOptions  # noqa: E402
from .raw_document import parse_raw_document  # noqa: E402

__all__ = [
    "FormatError",
    "FormatErrorReason",
    "HomingNubType",
    "Key",
    "LayoutMetadata",
    "LayoutOption",
    "NormalizedLayout",
    "ParseOptions",
    "from_via",
    "interpret_document",
    "parse_layout",
    "parse_layout_file",
    "parse_raw_document",
    "to_kle",
    "to_kle_rows",
    "to_via",
]
