"""Request-scoped temporary media storage."""
