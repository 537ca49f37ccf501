"""Persistence layer: database manager, models, repositories and stores."""
