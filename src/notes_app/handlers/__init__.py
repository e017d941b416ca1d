"""Lambda handlers for the notes API."""
