"""Check that the Supabase project is ready for Smart Bookmark.

Usage:
    python scripts/check_bookmarks_table.py

Reads SUPABASE_URL and SUPABASE_ANON_KEY from local.env and queries the
bookmarks table through the REST API.  An anonymous request should come
back empty (RLS on); a 404 means the table does not exist yet.
"""

import os
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv

# Load env from project root
env_path = Path(__file__).resolve().parent.parent / "local.env"
load_dotenv(env_path)

SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
TABLE = os.getenv("BOOKMARKS_TABLE", "bookmarks")

if not SUPABASE_URL:
    print("Error: SUPABASE_URL not set in local.env")
    sys.exit(1)

if not ANON_KEY:
    print("Error: SUPABASE_ANON_KEY not set in local.env")
    sys.exit(1)


def check_table() -> None:
    """Query the table anonymously and report what came back."""
    url = f"{SUPABASE_URL}/rest/v1/{TABLE}"
    headers = {"apikey": ANON_KEY, "Authorization": f"Bearer {ANON_KEY}"}
    resp = httpx.get(url, params={"select": "id", "limit": 1}, headers=headers, timeout=10)

    if resp.status_code == 404:
        print(f"Table '{TABLE}' not found: {resp.text[:200]}")
        sys.exit(1)
    if resp.status_code != 200:
        print(f"Unexpected status {resp.status_code}: {resp.text[:200]}")
        sys.exit(1)

    rows = resp.json()
    if rows:
        print(f"Warning: anonymous request returned {len(rows)} row(s); is RLS enabled?")
    else:
        print(f"Table '{TABLE}' reachable, anonymous read returns no rows.")


if __name__ == "__main__":
    print(f"Checking {SUPABASE_URL} ...")
    check_table()
