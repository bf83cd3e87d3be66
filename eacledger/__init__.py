"""EAC ledger core - attachments, cross-entity references and summaries."""

__version__ = "0.1.0"
