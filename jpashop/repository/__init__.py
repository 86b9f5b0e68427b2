"""Read-side repositories: entity queries and DTO projections."""
