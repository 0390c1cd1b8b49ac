"""Infrastructure: persistence and external collaborators (attachment storage)."""
