"""Domain layer for MemberDesk.

Entities, collaborator interfaces and services. Nothing in this package
imports FastAPI or talks to a database driver directly.
"""
