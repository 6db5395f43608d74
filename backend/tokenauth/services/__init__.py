"""Application services: the token lifecycle and its shared building blocks."""
