"""Uploaded document helpers: file-signature sniffing and acceptance rules."""

from apps.backend.core.domain.exchange import DocumentUpload
from apps.backend.core.domain.errors import ValidationError


MAX_DOCUMENT_SIZE = 5 * 1024 * 1024  # 5MB

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "application/pdf")

EXTENSIONS = {
    "application/pdf": ".pdf",
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "application/octet-stream": ".bin",
}

_PNG_SIGNATURE = bytes.fromhex("89504e470d0a1a0a")


def sniff_content_type(content: bytes) -> str:
    """Detect PDF, PNG or JPEG from the leading (and for JPEG trailing) bytes."""
    if content[:5] == b"%PDF-":
        return "application/pdf"
    if content[:8] == _PNG_SIGNATURE:
        return "image/png"
    if len(content) >= 4 and content[:2] == b"\xff\xd8" and content[-2:] == b"\xff\xd9":
        return "image/jpeg"
    return "application/octet-stream"


def extension_for(content_type: str) -> str:
    return EXTENSIONS.get(content_type, ".bin")


def _format_size(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size // (1024 * 1024)}MB"
    return f"{size} bytes"


def check_document(
    upload: DocumentUpload,
    field: str,
    max_size: int = MAX_DOCUMENT_SIZE,
) -> str:
    """
    Ensure an upload is a JPEG, PNG or PDF within the size limit.

    Returns:
        The sniffed content type

    Raises:
        ValidationError: attributed to `field`
    """
    if upload.size == 0:
        raise ValidationError(field, "Uploaded file is empty")
    if upload.size > max_size:
        raise ValidationError(field, f"File size must not exceed {_format_size(max_size)}")
    content_type = sniff_content_type(upload.content)
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(field, "Invalid file type. Please upload a JPG, PNG, or PDF file")
    return content_type
