"""Modal dialogs for the Wikipedia Searcher TUI.

Import modals from this package: ``from wiki_searcher.modals import HistoryModal``
"""

from wiki_searcher.modals.history import HistoryListItem, HistoryModal, format_timestamp

__all__ = [
    "HistoryListItem",
    "HistoryModal",
    "format_timestamp",
]
