"""Services built on the editor session (batch relink, progress, summary)."""
