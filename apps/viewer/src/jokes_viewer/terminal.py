from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
import sys
from typing import TextIO

from jokes_shared.logging_config import setup_logging
from jokes_viewer.api_client import HttpJokesClient
from jokes_viewer.config import get_viewer_settings
from jokes_viewer.connectivity import ManualConnectivity
from jokes_viewer.storage import JokeCache, LocalStorage
from jokes_viewer.viewer import JokeViewer, ViewState

HELP_TEXT = "commands: [n]ext  [r]efresh  [o]nline  o[f]fline  [q]uit"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jokes-viewer",
        description="Browse jokes from the jokes service, one at a time",
    )
    parser.add_argument("--base-url", default=None, help="Jokes service base URL")
    parser.add_argument("--cache-path", default=None, help="Local storage file for cached jokes")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Start with connectivity marked as lost",
    )
    return parser


def format_view(state: ViewState) -> str:
    lines: list[str] = []
    if state.message is not None:
        retry = " (r to try again)" if state.show_retry and state.retry_enabled else ""
        lines.append(f"! {state.message}{retry}")
    if state.offline_indicator is not None:
        lines.append(f"~ {state.offline_indicator}")

    if state.loading:
        lines.append("Loading...")
    elif state.joke is not None:
        lines.append(state.joke.title)
        lines.append("")
        lines.append(state.joke.body)
        if state.show_next:
            lines.append("")
            lines.append("(n for the next joke)")
    elif state.empty_text is not None:
        lines.append(state.empty_text)
        if state.show_refresh:
            lines.append("(r to refresh)")

    return "\n".join(lines)


async def handle_command(
    viewer: JokeViewer,
    connectivity: ManualConnectivity,
    command: str,
) -> bool:
    """Apply one user command. Returns ``False`` when the user quits."""
    command = command.strip().lower()
    if command in {"q", "quit", "exit"}:
        return False
    if command in {"n", "next", ""}:
        viewer.next_joke()
    elif command in {"r", "refresh", "retry"}:
        await viewer.refresh()
    elif command in {"o", "online"}:
        connectivity.set_online(True)
    elif command in {"f", "offline"}:
        connectivity.set_online(False)
    await viewer.wait_idle()
    return True


async def run_viewer(
    viewer: JokeViewer,
    connectivity: ManualConnectivity,
    *,
    stdin: TextIO,
    stdout: TextIO,
) -> None:
    viewer.mount()
    try:
        await viewer.wait_idle()
        while True:
            print(format_view(viewer.render()), file=stdout)
            print(HELP_TEXT, file=stdout, flush=True)
            line = await asyncio.to_thread(stdin.readline)
            if not line:
                break
            if not await handle_command(viewer, connectivity, line):
                break
    finally:
        viewer.unmount()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_viewer_settings()
    setup_logging(settings.log_level)

    connectivity = ManualConnectivity(online=not args.offline)
    viewer = JokeViewer(
        client=HttpJokesClient(
            base_url=args.base_url or settings.base_url,
            timeout_seconds=args.timeout or settings.request_timeout_seconds,
        ),
        cache=JokeCache(LocalStorage(Path(args.cache_path or settings.cache_path))),
        connectivity=connectivity,
    )

    try:
        asyncio.run(run_viewer(viewer, connectivity, stdin=sys.stdin, stdout=sys.stdout))
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
