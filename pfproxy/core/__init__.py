"""Resolution pipeline components."""
