from __future__ import annotations


class RiskScanError(RuntimeError):
    """Base class for errors raised by the analysis worker."""


class ValidationError(RiskScanError):
    """A job or request is malformed, e.g. more files than the plan allows."""


class TransientFetchError(RiskScanError):
    """A single uploaded file could not be fetched from the object store."""


class ImagePreprocessError(RiskScanError):
    """A single uploaded file could not be decoded or normalized."""


class OCRError(RiskScanError):
    """The OCR engine is missing or failed on a single image."""


class ClassificationError(RiskScanError):
    """The language model could not be reached or refused the request."""


class PersistenceError(RiskScanError):
    """A job or report write/read against the document store failed."""


class PurgeError(RiskScanError):
    """An uploaded image could not be deleted for a reason other than not-found."""
