"""In-process message log used by the relay for debugging."""
