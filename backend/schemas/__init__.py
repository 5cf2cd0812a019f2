"""Request bodies (pydantic v2) for the league API."""
