# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import json

from lzstring import LZString
from pyurlon import stringify

from .kle_export import to_kle
from .model import NormalizedLayout
from .options import HomingNubType

SHARE_URL = "https://editor.keyboard-tools.xyz/#share="
LEGACY_URL = "http://www.keyboard-layout-editor.com/##"


def layout_to_url(
    layout: NormalizedLayout,
    legacy: bool = False,
    homing_nub_type: HomingNubType = HomingNubType.SCOOP,
) -> str:
    json_str = "[" + to_kle(layout, homing_nub_type) + "]"

    if legacy:
        kle_raw = json.loads(json_str)

        # keyboard-layout-editor uses old version of urlon,
        # for this reason each `_` in metadata value must be replaced with `-`
        # and all `$` in resulting url with `_`.
        # see https://github.com/cerebral/urlon/commit/efbdc00af4ec48cabb28372e6f3fcc0c0a30a4c7
        if kle_raw and isinstance(kle_raw[0], dict):
            for k, v in kle_raw[0].items():
                if isinstance(v, str):
                    kle_raw[0][k] = v.replace("_", "-")
        kle_url = stringify(kle_raw)
        return LEGACY_URL + kle_url.replace("$", "_")

    lz = LZString()
    return SHARE_URL + lz.compressToEncodedURIComponent(json_str)
