"""Print an ``x-auth-token`` for a subject id.

Usage:
    JWT_PRIVATE_KEY=... python create_token.py <subject-id> [--admin] [--days N]
"""
import argparse

from movie_rental_api.app.core.config import settings
from movie_rental_api.app.core.security import get_identity_verifier

parser = argparse.ArgumentParser(description="Issue a signed token for the Movie Rental API.")
parser.add_argument("subject_id", help="User id to put in the token")
parser.add_argument("--admin", action="store_true", help="Grant the administrative claim")
parser.add_argument("--days", type=int, default=365, help="Token lifetime in days")
args = parser.parse_args()
if not settings.jwt_private_key:
    parser.error("JWT_PRIVATE_KEY is not defined")

token = get_identity_verifier().issue(args.subject_id, args.admin, expires_in=args.days * 24 * 60 * 60)
print(token)
