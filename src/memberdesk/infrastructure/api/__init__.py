"""HTTP API for MemberDesk."""
