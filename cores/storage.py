# cores/storage.py
"""
File storage port.

Papers, answer sheets and evaluated sheets are kept in Django's default
storage backend (local disk, S3, in-memory for tests). The rest of the code
only ever holds the returned storage reference and asks for a short-lived
download URL when a file has to be shown.
"""
import logging
import os
import uuid

from django.conf import settings
from django.core import signing
from django.core.files.storage import default_storage
from django.urls import reverse

from .exceptions import InvalidUpload

logger = logging.getLogger(__name__)

_SIGNER_SALT = "testseries.file-url"


def _config(key):
    return settings.TESTSERIES[key]


def validate_upload(uploaded_file):
    """Only PDFs under the configured size limit are accepted."""
    if uploaded_file is None:
        raise InvalidUpload("No file uploaded. Please select a PDF file.")
    content_type = getattr(uploaded_file, "content_type", None)
    if content_type not in _config("ALLOWED_UPLOAD_TYPES"):
        raise InvalidUpload()
    if uploaded_file.size > _config("MAX_UPLOAD_BYTES"):
        raise InvalidUpload("File is too large.")


def store_file(uploaded_file, folder):
    """Persist the upload and return its storage reference."""
    _, ext = os.path.splitext(uploaded_file.name or "")
    name = f"{folder}/{uuid.uuid4().hex}{ext.lower() or '.pdf'}"
    ref = default_storage.save(name, uploaded_file)
    logger.debug("Stored %s (%s bytes)", ref, uploaded_file.size)
    return ref


def delete_file(ref):
    """Best-effort cleanup; used after a failed transition."""
    if not ref:
        return
    try:
        default_storage.delete(ref)
    except OSError:
        logger.exception("Cleanup failed for stored file %s", ref)


def get_file_url(ref):
    """Short-lived URL for a stored file (see FileDownloadView)."""
    token = signing.TimestampSigner(salt=_SIGNER_SALT).sign(ref)
    return reverse("file-download", kwargs={"token": token})


def open_signed_file(token):
    """
    Resolve a token produced by get_file_url.
    Raises signing.BadSignature (or SignatureExpired) for tampered/old links.
    """
    ref = signing.TimestampSigner(salt=_SIGNER_SALT).unsign(
        token, max_age=_config("FILE_URL_MAX_AGE")
    )
    return ref, default_storage.open(ref, "rb")
