"""Terminal bookmark dashboard.

Signs in, then keeps the list in sync with Supabase Realtime until you
sign out or quit.

Usage:
    cd api && python -m cli.dashboard

Commands:
    add <title> | <url>   add a bookmark
    rm <n>                delete the n-th bookmark of the current view
    search [term]         filter by title/url (no term clears the filter)
    ls                    redraw the list
    logout                sign out
    quit                  leave without signing out
"""

from __future__ import annotations

import asyncio
import getpass
import logging
import sys
from pathlib import Path

# Ensure api/ is on sys.path
_api_dir = str(Path(__file__).resolve().parent.parent)
if _api_dir not in sys.path:
    sys.path.insert(0, _api_dir)

from core.config import settings
from services.dashboard import BookmarkDashboard, DashboardContext, DashboardState

logger = logging.getLogger(__name__)


def parse_command(line: str) -> tuple[str, list[str]]:
    """Split an input line into a command name and its arguments.

    ``add`` takes ``title | url``; every other command takes the rest of the
    line as a single argument (or none).
    """
    line = line.strip()
    if not line:
        return "", []
    name, _, rest = line.partition(" ")
    name = name.lower()
    rest = rest.strip()

    if name == "add":
        title, sep, url = rest.rpartition("|")
        if not sep:
            return name, [rest, ""]
        return name, [title.strip(), url.strip()]
    return name, [rest] if rest else []


def render_state(state: DashboardState) -> str:
    """Render the dashboard as plain text."""
    if state.loading:
        return "Loading..."

    email = state.user.email if state.user else ""
    lines = [f"Smart Bookmark  {email}".rstrip()]
    if state.search_term:
        lines.append(f"Search: {state.search_term}")
    if state.adding:
        lines.append("Adding...")

    visible = state.filtered_bookmarks
    if not visible:
        lines.append("No bookmarks found. Start by adding one above!")
    for i, bookmark in enumerate(visible, start=1):
        lines.append(f"{i:>3}. {bookmark.title}  <{bookmark.url}>")
    return "\n".join(lines)


async def run_command(dashboard: BookmarkDashboard, name: str, args: list[str]) -> bool:
    """Run one parsed command.  Returns ``False`` when the loop should stop."""
    if name == "add":
        if len(args) < 2 or not args[0] or not args[1]:
            print("Usage: add <title> | <url>")
            return True
        # Store failures are reported through the dashboard's alert.
        await dashboard.add_bookmark(args[0], args[1])
    elif name == "rm":
        visible = dashboard.filtered_bookmarks
        try:
            bookmark = visible[int(args[0]) - 1]
        except (IndexError, ValueError):
            print("Usage: rm <n>")
            return True
        await dashboard.delete_bookmark(bookmark.id)
    elif name == "search":
        dashboard.set_search_term(args[0] if args else "")
    elif name == "ls":
        print(render_state(dashboard.state))
    elif name == "logout":
        await dashboard.sign_out()
    elif name == "quit":
        return False
    elif name:
        print(f"Unknown command: {name}")
    return True


async def _command_loop(dashboard: BookmarkDashboard, left: asyncio.Event) -> None:
    while not left.is_set():
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            return
        name, args = parse_command(line)
        if not await run_command(dashboard, name, args):
            return


async def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from services.database import get_async_supabase_client

    client = await get_async_supabase_client()

    email = input("Email: ").strip()
    password = getpass.getpass("Password: ")
    try:
        await client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as exc:
        print(f"[cli] Sign-in failed: {exc}")
        return

    left = asyncio.Event()

    def navigate(path: str) -> None:
        print(f"[cli] -> {path}")
        left.set()

    context = DashboardContext(
        client=client,
        navigate=navigate,
        alert=lambda message: print(f"[error] {message}"),
    )
    on_change = lambda state: print(render_state(state))  # noqa: E731

    async with BookmarkDashboard(context, on_state_change=on_change) as dashboard:
        if dashboard.user is None:
            return
        await _command_loop(dashboard, left)

    print("[cli] Done.")


if __name__ == "__main__":
    asyncio.run(main())
