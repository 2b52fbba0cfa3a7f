#!/usr/bin/env python3
"""
Register a client directly in the JSON document (same rules as the portal).

Usage:
  python scripts/add_client.py --name "Ada Lovelace" --email ada@example.com [--risk high] [--data-file data/clients.json]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from portal.core.config import get_settings
from portal.core.logging import configure_logging
from portal.services.client_service import ClientService, ClientValidationError


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Add a client record")
    ap.add_argument("--name", required=True, help="Full name")
    ap.add_argument("--email", required=True, help="Contact email")
    ap.add_argument("--risk", default="Low", help="Low, Medium or High (default: Low)")
    ap.add_argument("--data-file", help="Collection document (default: CLIENTS_DATA_FILE)")
    args = ap.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    svc = ClientService(Path(args.data_file) if args.data_file else settings.data_file)
    try:
        client = svc.create({"fullName": args.name, "email": args.email, "riskCategory": args.risk})
    except ClientValidationError as exc:
        for detail in exc.details:
            sys.stderr.write(f"Error: {detail}\n")
        return 1

    print("OK: client registered")
    print(f"  ID: {client.id}")
    print(f"  Name: {client.full_name}")
    print(f"  Email: {client.email}")
    print(f"  Risk: {client.risk_category}")
    print(f"  Created: {client.created_date}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
