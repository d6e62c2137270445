"""
Input preparation for the Credence engine.

This module provides the ContentSanitizer class which turns raw text and an
optional source URL into the ``NormalizedContent`` the analyzers expect:
Unicode and whitespace normalization, control character removal, truncation
to the configured maximum length, and source domain extraction. It never
fetches or parses HTML; extraction happens before content gets here.
"""
import logging
import re
import unicodedata
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .credence_config import MAX_INPUT_LENGTH
from .errors import InputError
from .models import NormalizedContent

log = logging.getLogger(__name__)

class ContentSanitizer:
    """Validates, normalizes and bounds input text."""

    # Control characters to strip (except newline/tab)
    CONTROL_CHARS = set(chr(i) for i in range(32) if i not in (9, 10, 13))

    def __init__(self, max_length: int = MAX_INPUT_LENGTH):
        self.max_length = max_length

    @staticmethod
    def normalize(text: str) -> str:
        """Normalize text for consistent processing.

        Args:
            text: Raw input text

        Returns:
            NFKC-normalized text with runs of whitespace collapsed to one space

        Raises:
            ValueError: If text cannot be normalized
        """
        try:
            text = unicodedata.normalize("NFKC", text)
            text = "".join(ch for ch in text if ch not in ContentSanitizer.CONTROL_CHARS)
            text = re.sub(r"\s+", " ", text)
            return text.strip()
        except Exception as e:
            raise ValueError(f"Failed to normalize text: {str(e)}")

    @staticmethod
    def extract_domain(url: Optional[str]) -> Optional[str]:
        """Host name of a URL, lower-cased and without port.

        Bare host names ("bbc.co.uk/news") are accepted too.
        """
        if not url or not url.strip():
            return None
        candidate = url.strip()
        if "://" not in candidate:
            candidate = f"//{candidate}"
        try:
            host = urlparse(candidate).hostname
        except ValueError:
            return None
        return host.lower() if host else None

    def audit_text(self, text: Any) -> Dict[str, Any]:
        """Audit raw input before analysis.

        Returns:
            Dict containing:
            - normalized: Normalized and truncated text
            - issues: Problems that stop analysis
            - warnings: Informational notes (truncation, stripped characters)
            - ok: Whether analysis can proceed
        """
        if not isinstance(text, str):
            return {"normalized": "", "issues": ["invalid_type"], "warnings": [], "ok": False}

        issues: List[str] = []
        warnings: List[str] = []

        if any(ch in text for ch in self.CONTROL_CHARS):
            warnings.append("control_chars_removed")

        try:
            normalized = self.normalize(text)
        except ValueError as e:
            issues.append(f"normalization_failed:{str(e)}")
            normalized = ""

        if len(normalized) > self.max_length:
            warnings.append("truncated")
            normalized = normalized[:self.max_length].rstrip()

        if not normalized and not issues:
            issues.append("empty_text")

        return {
            "normalized": normalized,
            "issues": issues,
            "warnings": warnings,
            "ok": not issues,
        }

    def prepare(self, text: Optional[str], url: Optional[str] = None) -> NormalizedContent:
        """Build analyzable content from raw text and an optional source URL.

        Raises:
            InputError: If no text remains after normalization
        """
        audit = self.audit_text(text if text is not None else "")
        if not audit["ok"]:
            raise InputError(f"No content provided for analysis ({', '.join(audit['issues'])})")
        if "truncated" in audit["warnings"]:
            log.info("Input truncated to %d characters", self.max_length)
        return NormalizedContent(text=audit["normalized"], source_domain=self.extract_domain(url))

def prepare_content(text: Optional[str], url: Optional[str] = None,
                    max_length: int = MAX_INPUT_LENGTH) -> NormalizedContent:
    """Convenience wrapper around ``ContentSanitizer.prepare``."""
    return ContentSanitizer(max_length=max_length).prepare(text, url)
