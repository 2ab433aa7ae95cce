"""
Issue an admin bearer token for the /admin and /jobs endpoints.
Usage: python issue_admin_token.py <admin-id> [--hours N]
"""
import argparse
from datetime import timedelta

from rise_settlement.core.config import get_settings
from rise_settlement.core.security import create_access_token


def main():
    parser = argparse.ArgumentParser(description="Issue an admin bearer token")
    parser.add_argument("admin_id")
    parser.add_argument("--role", default="admin", choices=["admin", "super_admin"])
    parser.add_argument("--hours", type=int, default=24)
    args = parser.parse_args()

    token = create_access_token(
        args.admin_id, args.role, get_settings(), expires_delta=timedelta(hours=args.hours)
    )
    print(token)


if __name__ == "__main__":
    main()
