"""
Helpers for reading and serving uploaded documents.
"""

from django.http import HttpResponse

from apps.backend.core.domain.documents import extension_for, sniff_content_type
from apps.backend.core.domain.exchange import DocumentUpload


def document_from(request, field):
    """Read an uploaded file into a DocumentUpload, or None when absent."""
    upload = request.FILES.get(field)
    if upload is None:
        return None
    return DocumentUpload(
        filename=upload.name,
        content=upload.read(),
        content_type=upload.content_type or 'application/octet-stream',
    )


def document_response(content, basename):
    """Serve stored bytes with a content type sniffed from the file signature."""
    content_type = sniff_content_type(content)
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'inline; filename="{basename}{extension_for(content_type)}"'
    response['X-Content-Type-Options'] = 'nosniff'
    return response
