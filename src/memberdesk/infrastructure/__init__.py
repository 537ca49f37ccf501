"""Infrastructure for MemberDesk: persistence, identity clients and the HTTP API."""
