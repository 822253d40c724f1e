from __future__ import annotations

import re

from ..core.errors import InvalidInputError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
MAX_VERSION_LENGTH = 20


def validate_emphasis_color(value: str) -> str:
    """確認強調色為 #RRGGBB 格式並回傳小寫值。"""

    color = value.strip()
    if not _HEX_COLOR.match(color):
        raise InvalidInputError(f"Color inválido: {value!r} (formato #RRGGBB)")
    return color.lower()


def validate_logo_url(value: str) -> str:
    url = value.strip()
    if not url:
        raise InvalidInputError("La URL del logotipo es obligatoria")
    return url


def validate_version_label(value: str) -> str:
    """確認版本名稱不為空、無空白且長度合理。"""

    label = value.strip()
    if not label:
        raise InvalidInputError("La versión es obligatoria")
    if len(label) > MAX_VERSION_LENGTH or any(char.isspace() for char in label):
        raise InvalidInputError(f"Versión inválida: {value!r}")
    return label
