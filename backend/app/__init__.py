"""DevSearch backend."""
