"""
Validate an access token against this process's JWT settings and print its claims.
Useful for diagnosing issuer/audience/secret drift between services. Run from project root:
  python -m storefront_identity.scripts.inspect_token TOKEN
Example (check against another service's settings):
  JWT_SECRET=... JWT_AUDIENCE=... python -m storefront_identity.scripts.inspect_token eyJhbGciOi...
"""
import argparse
import json
import sys

import jwt

from storefront_identity.core.config import get_settings
from storefront_identity.core.security import decode_access_token


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Verify a storefront access token.")
    parser.add_argument("token", help="Access token (with or without 'Bearer ' prefix)")
    args = parser.parse_args(argv)

    token = args.token.strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()

    settings = get_settings()
    try:
        claims = decode_access_token(token, settings)
    except jwt.ExpiredSignatureError:
        print("Token expired.", file=sys.stderr)
        return 1
    except jwt.InvalidIssuerError:
        print(f"Issuer mismatch (expected '{settings.JWT_ISSUER}').", file=sys.stderr)
        return 1
    except jwt.InvalidAudienceError:
        print(f"Audience mismatch (expected '{settings.JWT_AUDIENCE}').", file=sys.stderr)
        return 1
    except jwt.PyJWTError as e:
        print(f"Invalid token: {e}", file=sys.stderr)
        return 1
    print(json.dumps(claims, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
