"""External collaborators (file storage)."""
