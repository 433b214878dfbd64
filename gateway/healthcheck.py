#!/usr/bin/env python3
"""
Check service health through the gateway.

Queries the gateway's own /health and the backend health relayed through
/api/health. Exits 0 only when both answer 200.
"""

import argparse
import sys
from typing import Dict, List, Optional, Tuple

import httpx

CHECKS: List[Tuple[str, str]] = [
    ("Gateway", "/health"),
    ("Backend (via gateway)", "/api/health"),
]


def check_health(client: httpx.Client, base_url: str) -> Dict[str, Optional[int]]:
    """Return the status code of every check, None when the call failed"""
    results: Dict[str, Optional[int]] = {}
    for name, path in CHECKS:
        try:
            response = client.get(f"{base_url.rstrip('/')}{path}")
            results[name] = response.status_code
        except httpx.HTTPError:
            results[name] = None
    return results


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check storefront service health")
    parser.add_argument("--url", default="http://localhost:5921", help="Gateway base URL")
    parser.add_argument("--timeout", type=float, default=5.0, help="Per request timeout in seconds")
    args = parser.parse_args(argv)

    with httpx.Client(timeout=args.timeout) as client:
        results = check_health(client, args.url)

    healthy = True
    for name, status in results.items():
        if status is None:
            print(f"{name}: not responding")
            healthy = False
        else:
            print(f"{name}: HTTP {status}")
            healthy = healthy and status == 200

    return 0 if healthy else 1


if __name__ == "__main__":
    sys.exit(main())
