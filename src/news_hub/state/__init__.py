"""Per-user reading state: read set, bookmarks, history, streak, preferences."""
