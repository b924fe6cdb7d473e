"""Next-edit suggestion ("NES") history, pending state and ingestion."""
from nextedit.nes.fingerprint import capture_original_text
from nextedit.nes.history import HISTORY_DEPTH, SuggestionEntry, SuggestionHistory
from nextedit.nes.ingestor import RequestContext, RequestToken, ResponseIngestor
from nextedit.nes.pending import NavigationOutcome, PendingState, PendingSuggestionController
from nextedit.nes.session import NextEditSession

__all__ = [
    "HISTORY_DEPTH",
    "NavigationOutcome",
    "NextEditSession",
    "PendingState",
    "PendingSuggestionController",
    "RequestContext",
    "RequestToken",
    "ResponseIngestor",
    "SuggestionEntry",
    "SuggestionHistory",
    "capture_original_text",
]
