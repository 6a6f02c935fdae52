"""ScanVault: authenticated scan ingestion and document storage.

Users upload scanned images or PDFs, the service recognises their text
with an OCR model, and each user can list, edit and delete only the
documents they own.
"""

__version__ = "1.0.0"
