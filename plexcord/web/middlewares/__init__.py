"""Web middlewares."""
