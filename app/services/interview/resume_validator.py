"""Resume upload validation for the interview setup form."""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, Set
import logging

from app.core.config import settings
from app.core.exceptions import ResumeValidationError


@dataclass(frozen=True)
class UploadedResume:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class ResumeValidator:
    """
    Validates uploaded resume files before anything is written to storage.

    Responsibilities:
    - Reject empty or oversized uploads
    - Verify file extension
    - Validate MIME type via magic bytes
    """

    VALID_EXTENSIONS: Set[str] = {'.pdf', '.txt', '.doc', '.docx'}

    # Magic bytes for MIME type detection
    MIME_SIGNATURES: Dict[str, bytes] = {
        '.pdf': b'%PDF',
        '.doc': b'\xd0\xcf\x11\xe0',  # OLE Compound Document
        '.docx': b'PK\x03\x04',        # ZIP (Office Open XML)
    }

    def __init__(self, logger: logging.Logger = None, max_size_mb: int = None):
        self.logger = logger or logging.getLogger(__name__)
        max_size_mb = max_size_mb if max_size_mb is not None else settings.MAX_FILE_SIZE_MB
        self.max_size_bytes = max_size_mb * 1024 * 1024

    def validate(self, resume: UploadedResume) -> None:
        """
        Raises:
            ResumeValidationError: If the file is empty, too large, has an unsupported
                extension or its content does not match the extension.
        """
        name = PurePath(resume.filename).name
        if not name or name != resume.filename:
            raise ResumeValidationError(f"Invalid resume file name: {resume.filename!r}")

        size = len(resume.content)
        if size == 0:
            raise ResumeValidationError(f"Resume file is empty: {name}")

        if size > self.max_size_bytes:
            max_mb = self.max_size_bytes / (1024 * 1024)
            raise ResumeValidationError(
                f"Resume file too large: {size / (1024 * 1024):.1f}MB exceeds {max_mb:.0f}MB limit"
            )

        extension = PurePath(name).suffix.lower()
        if extension not in self.VALID_EXTENSIONS:
            raise ResumeValidationError(
                f"Invalid file extension: {extension or '(none)'}. "
                f"Supported: {', '.join(sorted(self.VALID_EXTENSIONS))}"
            )

        signature = self.MIME_SIGNATURES.get(extension)
        if signature is not None and not resume.content.startswith(signature):
            raise ResumeValidationError(
                f"File content does not match {extension} format. "
                f"File may be corrupted or have wrong extension."
            )

        self.logger.info(f"Resume validation passed: {name} ({size / 1024:.1f}KB)")
