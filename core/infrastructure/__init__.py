"""Infrastructure layer - chain access, metadata providers, persistence."""
