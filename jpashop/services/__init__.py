"""Application services that own their unit of work."""
