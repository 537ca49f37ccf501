"""MemberDesk - member login and credential management.

Members sign in with their member number. Records and identities are
created on first login, and credentials move from the member number to a
password the member chooses.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
