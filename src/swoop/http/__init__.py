"""HTTP primitives — immutable request metadata and a streaming response writer."""
