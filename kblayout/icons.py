# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .defaults import ICON_TEXT_SIZE

# fmt: off
# Trashcons glyph font, code points in private use area
TRASHCONS_GLYPHS = [
    "left", "right", "down", "up", "mult", "minus", "plus", "div",
    "lower", "raise", "fn", "shift", "delete", "backspace", "enter", "esc",
    "tab", "menu", "sys", "alt", "ctrl", "home", "end", "pgup",
    "pgdn", "capslock", "numlock", "scrllock", "prntscrn", "pause", "insert",
]

# vector icons, rendered by name so registry content stays empty
KBD_VECTOR_ICONS = [
    "1_round_filled_1", "1_round_filled_2", "1_round",
    "a_round_filled_sanserif", "a_round_filled_serif", "a_round_sanserif",
    "a_square_filled_sanserif", "a_square_filled_serif",
    "arrows_bottom_1", "arrows_bottom_2", "arrows_bottom_3", "arrows_bottom_4",
    "arrows_down_circle_filled", "arrows_down",
    "arrows_left_circle_filled", "arrows_left",
    "arrows_right_circle_filled", "arrows_right",
    "arrows_top_1", "arrows_top_2", "arrows_top_3", "arrows_top_4",
    "arrows_up_circle_filled", "arrows_up_left", "arrows_up_right", "arrows_up",
    "hamburger_menu", "line_end", "line_start_end", "line_start",
    "multimedia_back", "multimedia_down", "multimedia_eject",
    "multimedia_fastforwar", "multimedia_fastforward_end",
    "multimedia_mute_1", "multimedia_mute_2", "multimedia_mute_3", "multimedia_mute_4",
    "multimedia_pause", "multimedia_play_pause", "multimedia_play",
    "multimedia_record", "multimedia_rewind_start", "multimedia_rewind",
    "multimedia_stop", "multimedia_up",
    "multimedia_volume_down_1", "multimedia_volume_down_2",
    "multimedia_volume_up_1", "multimedia_volume_up_2",
    "redo_1", "return_1", "return_2", "return_3", "return_4",
    "scissors_1", "scissors_2", "scissors_3", "search_1", "search_2",
    "symbol_alien", "symbol_ankh", "symbol_keyboard", "symbol_peace",
    "symbol_skull_bones_1", "symbol_skull_bones_2", "symbol_yinyang",
    "tab_1", "tab_2", "undo_1", "undo_2", "undo_3",
    "unicode_alternate_1", "unicode_alternate_2",
    "unicode_backspace_deleteleft_big", "unicode_backspace_deleteleft_small",
    "unicode_break_1", "unicode_break_2",
    "unicode_clearscreen_1", "unicode_clearscreen_2", "unicode_clock",
    "unicode_command_1", "unicode_command_3",
    "unicode_control_1", "unicode_control_2", "unicode_control_3",
    "unicode_decimal_separator_1", "unicode_decimal_separator_2",
    "unicode_deleteright_big", "unicode_deleteright_small",
    "unicode_enter_1", "unicode_enter_2", "unicode_escape_1", "unicode_escape_2",
    "unicode_hourglass_1", "unicode_hourglass_2",
    "unicode_insert_1", "unicode_insert_2",
    "unicode_lock_closed_1", "unicode_lock_closed_2",
    "unicode_lock_open_1", "unicode_lock_open_2",
    "unicode_option_1", "unicode_option_2",
    "unicode_page_down_1", "unicode_page_down_2", "unicode_page_down_3",
    "unicode_page_up_1", "unicode_page_up_2", "unicode_page_up_3",
    "unicode_pause_1", "unicode_pause_2",
    "unicode_printscreen_1", "unicode_printscreen_2",
    "unicode_screen_bright", "unicode_screen_dim",
    "unicode_scroll_1", "unicode_scroll_2", "unicode_stopwatch",
    "batman", "community_awesome_invert", "community_awesome", "community_hapster",
    "copyleft", "logo_amiga", "logo_android", "logo_apple_outline", "logo_apple",
    "logo_atari", "logo_bsd_freebsd", "logo_commodore", "logo_gnu",
    "logo_linux_archlinux", "logo_linux_centos", "logo_linux_debian",
    "logo_linux_edubuntu", "logo_linux_fedora", "logo_linux_gentoo",
    "logo_linux_knoppix", "logo_linux_opensuse", "logo_linux_redhat",
    "logo_linux_tux_ibm_invert", "logo_linux_tux_ibm", "logo_linux_tux",
    "logo_ubuntu_cof_circle", "logo_ubuntu_cof", "logo_vim",
    "logo_windows_7", "logo_windows_8", "logo_winlin_cygwin",
]
# fmt: on

# custom glyph ranges of the kbd icon font: (first, last) code point
KBD_CUSTOM_RANGES = [
    (0xE600, 0xE619),
    (0xE700, 0xE704),
    (0xE800, 0xE870),
    (0xE8A0, 0xE8A6),
]


def _build_icon_map() -> Dict[str, str]:
    icons: Dict[str, str] = {"icon-40s-logo": ""}
    for offset, name in enumerate(TRASHCONS_GLYPHS):
        icons[f"icon-{name}"] = chr(0xE900 + offset)
    for name in KBD_VECTOR_ICONS:
        icons[f"icon-kbd-{name}"] = ""
    for first, last in KBD_CUSTOM_RANGES:
        for code_point in range(first, last + 1):
            icons[f"icon-kbd-uni{code_point:x}_kbd_custom"] = ""
    return icons


ICON_MAP: Dict[str, str] = _build_icon_map()

# <span class="..."> or <i class="...">, self-closing, closed or left open
ICON_TAG_RE = re.compile(
    r"<(span|i)\s+class=[\"']([^\"']+)[\"']\s*(?:/>|>(?:[^<]*</\1>)?)",
    re.IGNORECASE,
)
HAS_ICONS_RE = re.compile(
    r"<(span|i)\s+class=[\"'][^\"']*(?:trashcons|icon-|custom-icon)[^\"']*[\"']"
)


@dataclass
class IconPart:
    type: str
    content: str
    className: Optional[str] = None  # noqa: N815
    iconName: Optional[str] = None  # noqa: N815
    markup: str = field(default="", compare=False, repr=False)


def parse_icon_legend(legend: str) -> List[IconPart]:
    """Split legend into text and icon parts.

    Tags without known icon class are kept as text, verbatim.
    """
    result: List[IconPart] = []
    last_index = 0

    for match in ICON_TAG_RE.finditer(legend):
        if match.start() > last_index:
            result.append(IconPart("text", legend[last_index : match.start()]))

        class_name = match.group(2)
        for cls in class_name.split():
            if cls in ICON_MAP:
                result.append(
                    IconPart("icon", ICON_MAP[cls], class_name, cls, match.group(0))
                )
                break
        else:
            result.append(IconPart("text", match.group(0)))

        last_index = match.end()

    if last_index < len(legend):
        result.append(IconPart("text", legend[last_index:]))

    return result


def icon_parts_to_html(parts: Sequence[IconPart]) -> str:
    html = []
    for part in parts:
        if part.type == "icon" and part.className:
            html.append(part.markup or f'<span class="{part.className}"></span>')
        else:
            html.append(part.content)
    return "".join(html)


def icon_parts_to_text(parts: Sequence[IconPart]) -> str:
    return "".join(part.content for part in parts)


def has_icons(legend: str) -> bool:
    return bool(legend) and HAS_ICONS_RE.search(legend) is not None


def apply_icon_text_sizes(
    slots: Sequence[str], sizes: Sequence[Optional[float]]
) -> List[Optional[float]]:
    """Returns per-slot text sizes with icon legends forced to ICON_TEXT_SIZE
    unless given slot has explicit size already
    """
    result: List[Optional[float]] = list(sizes)
    for index, legend in enumerate(slots):
        if has_icons(legend):
            if len(result) <= index:
                result.extend((index + 1 - len(result)) * [None])
            if not result[index]:
                result[index] = ICON_TEXT_SIZE
    return result
