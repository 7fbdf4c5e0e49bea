"""
Seed companies: doc file JSON (list hoac {"companies": [...]}) va POST /api/companies/bulk.
Invalid items are skipped server-side; prints how many were created.
Exit codes: 2 unreadable/invalid input, 5 API failure.
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

from app.client import CompanyApiClient, CompanyApiError
from app.logging_config import configure_logging

EXIT_INVALID_INPUT = 2
EXIT_API_FAIL = 5


def load_companies(path: Path) -> list:
    """Read a JSON list of companies (or {"companies": [...]}). ValueError if the shape is wrong."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("companies")
    if not isinstance(data, list) or not data:
        raise ValueError("expected a non-empty JSON list of companies")
    return data


async def seed(companies: list, base_url: str | None) -> int:
    async with CompanyApiClient(base_url=base_url) as api:
        resp = await api.bulk_create(companies)
    return len(resp.get("data", []))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Bulk-load companies from a JSON file.")
    parser.add_argument("file", type=Path, help="JSON file: list of companies or {\"companies\": [...]}")
    parser.add_argument("--base-url", default=None, help="API root, e.g. http://localhost:8000/api (default API_BASE_URL)")
    args = parser.parse_args(argv)
    configure_logging()

    try:
        companies = load_companies(args.file)
    except (OSError, ValueError) as e:
        print(f"Invalid input {args.file}: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        created = asyncio.run(seed(companies, args.base_url))
    except CompanyApiError as e:
        print(f"Seed failed: {e.message}", file=sys.stderr)
        return EXIT_API_FAIL

    print(f"created={created} submitted={len(companies)} skipped={len(companies) - created}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
