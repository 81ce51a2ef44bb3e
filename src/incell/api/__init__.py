"""HTTP and WebSocket surface for the bridge."""
