"""Service layer: claim store, approval workflow, analytics and insights."""
