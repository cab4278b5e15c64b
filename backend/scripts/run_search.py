"""
Run a search end to end against the live APIs and print the grouped results.

Run from backend with:
  python scripts/run_search.py
  python scripts/run_search.py "Your search query" [sort] [email-to]

Requires: REDDIT_CLIENT_ID, REDDIT_CLIENT_SECRET, REDDIT_REFRESH_TOKEN in env (or .env).
Passing an address as the third argument also emails the results
(needs EMAIL_USER and EMAIL_PASS).
"""

import os
import sys
from textwrap import shorten

from dotenv import load_dotenv

load_dotenv()

# Add backend root so "app" is importable from scripts/ or from backend/
_backend_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _backend_root not in sys.path:
    sys.path.insert(0, _backend_root)

from app.errors import DevSearchError
from app.logging_config import configure_logging
from app.notify import send_results_email
from app.search import EmailRequest, SortKey, search_all


def _trunc(s: str, max_len: int = 72) -> str:
    return shorten(s, width=max_len, placeholder="…") if s else ""


def _section(title: str) -> None:
    print()
    print("=" * 80)
    print(f"  {title}")
    print("=" * 80)


def main() -> None:
    query = (sys.argv[1] if len(sys.argv) > 1 else "recursion").strip() or "recursion"
    sort = SortKey(sys.argv[2]) if len(sys.argv) > 2 else SortKey.ACTIVITY
    email_to = sys.argv[3] if len(sys.argv) > 3 else None

    missing = [k for k in ("REDDIT_CLIENT_ID", "REDDIT_CLIENT_SECRET", "REDDIT_REFRESH_TOKEN") if not os.environ.get(k)]
    if missing:
        print("Missing env vars (set or use .env):", ", ".join(missing))
        sys.exit(1)

    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

    _section(f"SEARCH: {query!r} (sort={sort.value})")
    try:
        results = search_all(query, sort)
    except DevSearchError as e:
        print(f"Search failed: {e}")
        sys.exit(2)

    _section(f"StackOverflow ({len(results.stack_overflow)})")
    print(f"{'#':>3}  {'score':>5}  {'tags':<28}  title")
    print("-" * 80)
    for i, r in enumerate(results.stack_overflow, 1):
        print(f"{i:>3}  {r.score if r.score is not None else '-':>5}  {_trunc(r.community_label, 28):<28}  {_trunc(r.title, 36)}")

    _section(f"Reddit ({len(results.reddit)})")
    print(f"{'#':>3}  {'subreddit':<20}  {'author':<16}  title")
    print("-" * 80)
    for i, r in enumerate(results.reddit, 1):
        print(f"{i:>3}  {_trunc(r.community_label, 20):<20}  {_trunc(r.author, 16):<16}  {_trunc(r.title, 36)}")

    if email_to:
        _section(f"EMAIL → {email_to}")
        try:
            print(send_results_email(EmailRequest(email=email_to, results=results.combined)))
        except DevSearchError as e:
            print(f"Email failed: {e}")
            sys.exit(3)

    _section("DONE")
    print(f"{len(results.combined)} results")
    print()


if __name__ == "__main__":
    main()
