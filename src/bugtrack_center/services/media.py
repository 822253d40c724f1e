from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional

from ..core.errors import MediaRejectedError
from ..core.types import MediaAttachment, MediaType

_BYTES_PER_MB = 1024 * 1024


def classify_media(content_type: Optional[str], size_bytes: int, max_video_mb: int) -> MediaType:
    """依 MIME 類型判斷附件種類，只限制影片大小。"""

    if content_type and content_type.startswith("image/"):
        return MediaType.IMAGE
    if content_type and content_type.startswith("video/"):
        if size_bytes > max_video_mb * _BYTES_PER_MB:
            raise MediaRejectedError(f"Límite de {max_video_mb}MB.")
        return MediaType.VIDEO
    raise MediaRejectedError(f"Tipo de archivo no admitido: {content_type or 'desconocido'}")


def attachment_from_path(path: Path, max_video_mb: int) -> MediaAttachment:
    """將本機檔案轉為附件描述，URL 使用 file:// URI。"""

    file_path = Path(path).resolve()
    if not file_path.is_file():
        raise MediaRejectedError(f"Archivo no encontrado: {path}")
    content_type, _ = mimetypes.guess_type(file_path.name)
    media_type = classify_media(content_type, file_path.stat().st_size, max_video_mb)
    return MediaAttachment(url=file_path.as_uri(), media_type=media_type)
