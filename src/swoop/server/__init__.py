"""Server side of swoop: dispatch, default handlers, static files, listener."""
