# SPDX-FileCopyrightText: 2025 adamws <adamws@users.noreply.github.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

DEFAULT_KEY_COLOR = "#f9f9f9"
DEFAULT_PROFILE = "DCS"
KEY_MAX_LABELS = 12
ICON_TEXT_SIZE = 9

# VIA keymap label slots: 'row,col' matrix position and 'option,choice'
VIA_MATRIX_POSITION_LABEL = 0
VIA_LAYOUT_OPTION_LABEL = 3
