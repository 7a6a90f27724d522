"""Government roster view models assembled from a PostgreSQL data source."""
