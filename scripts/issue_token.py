#!/usr/bin/env python3
# =============================================================================
# scripts/issue_token.py - Issue a Bearer Token
# =============================================================================
# Prints a token signed with SECRET_KEY that the running service accepts.
#
# Usage:
#   python scripts/issue_token.py alice
#   python scripts/issue_token.py alice --email alice@example.com --role admin
#   python scripts/issue_token.py alice --minutes 5
#
#   curl -H "Authorization: Bearer $(python scripts/issue_token.py alice)" \
#        http://localhost:8080/api/v1/auth/verify
#
# Prerequisites:
#   - SECRET_KEY / JWT_AUDIENCE must match the service (.env file)
# =============================================================================

import argparse
import os
import sys
from datetime import timedelta

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.auth import create_access_token
from app.config import get_settings


def main(argv=None):
    """Print a signed token for the given subject."""
    parser = argparse.ArgumentParser(description="Issue a bearer token for the DockerAPITest service")
    parser.add_argument("subject", help="Principal id ('sub' claim)")
    parser.add_argument("--email", help="Optional 'email' claim")
    parser.add_argument("--role", action="append", default=[], help="Role to include (repeatable)")
    parser.add_argument("--minutes", type=int, default=None, help="Lifetime in minutes (default: ACCESS_TOKEN_EXPIRE_MINUTES)")
    args = parser.parse_args(argv)

    expires = timedelta(minutes=args.minutes) if args.minutes is not None else None
    token = create_access_token(
        args.subject,
        get_settings(),
        email=args.email,
        roles=args.role,
        expires_delta=expires,
    )
    print(token)


if __name__ == "__main__":
    main()
