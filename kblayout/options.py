# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class HomingNubType(str, Enum):
    SCOOP = "scoop"
    BAR = "bar"
    NONE = "none"

    def __str__(self) -> str:
        return self.value

    @property
    def legend(self) -> str:
        if self == HomingNubType.NONE:
            return ""
        return self.value.title()

    @classmethod
    def get(cls, name: Union[str, HomingNubType]) -> HomingNubType:
        if isinstance(name, HomingNubType):
            return name
        if isinstance(name, str):
            try:
                return HomingNubType(name.lower())
            except ValueError:
                # fallback to error below to use 'name' before converting to lowercase
                pass
        msg = f"'{name}' is not a valid HomingNubType"
        raise ValueError(msg)


@dataclass
class ParseOptions:
    # front-center legend used for homing keys without SCOOP/BAR marker
    homing_nub_type: HomingNubType = HomingNubType.SCOOP

    def __post_init__(self) -> None:
        self.homing_nub_type = HomingNubType.get(self.homing_nub_type)
