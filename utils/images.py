# utils/images.py
from __future__ import annotations
from typing import Any, Optional
import base64
import mimetypes

from services.errors import ValidationError

MAX_IMAGE_BYTES = 2 * 1024 * 1024


def encode_image(data: bytes, mime_type: Optional[str] = None, filename: Optional[str] = None) -> str:
    """Turn raw image bytes into a `data:` URL that can be stored as a gift's imageUrl."""
    if not data:
        raise ValidationError.single("image_url", "Arquivo de imagem vazio")
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError.single("image_url", "Imagem muito grande (máximo 2 MB)")

    mime = mime_type or (mimetypes.guess_type(filename)[0] if filename else None) or "image/jpeg"
    if not mime.startswith("image/"):
        raise ValidationError.single("image_url", "O arquivo precisa ser uma imagem")

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def encode_uploaded_file(uploaded: Any) -> Optional[str]:
    """Accepts a Streamlit UploadedFile (or anything with getvalue/type/name)."""
    if uploaded is None:
        return None
    return encode_image(
        uploaded.getvalue(),
        mime_type=getattr(uploaded, "type", None),
        filename=getattr(uploaded, "name", None),
    )
