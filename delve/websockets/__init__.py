"""Socket.IO namespace handlers."""
