"""Database plumbing for the SQL snapshot store."""
