"""
CLI for Jotter.

Minimal CLI using stdlib. Subcommands are imported lazily to keep startup
fast on the capture path.

Usage:
    jotter "your note here"         # Save a note
    jotter shell                    # Interactive note widget
    jotter --help                   # Show help
"""

import sys
from typing import TYPE_CHECKING, Awaitable, Callable

if TYPE_CHECKING:
    from jotter.session import NoteSession


def print_help() -> None:
    """Print help message."""
    print("""jotter - local note-taking widget

Usage:
    jotter "your note here"       Save a note

Commands:
    jotter list [--sort ORDER]    Show notes (ORDER: newest | oldest)
    jotter sort ORDER             Remember the display order
    jotter shell                  Interactive widget with draft auto-save
    jotter login                  Show the note list
    jotter logout                 Hide the list, clear draft and sort order
    jotter status                 Show database and widget status

Options:
    jotter --help, -h             Show this help
    jotter --version, -v          Show version

Examples:
    jotter "Buy milk"
    echo "Call the bank" | jotter
    jotter list --sort oldest

Login is a visibility flag, not authentication.""")


def print_version() -> None:
    """Print version."""
    from jotter import __version__
    print(f"jotter {__version__}")


def notice(message: str) -> None:
    """Show a user-visible notice on stderr."""
    print(message, file=sys.stderr)


def not_logged_in() -> int:
    print("Not logged in. Run: jotter login", file=sys.stderr)
    return 1


def capture(text: str) -> int | None:
    """
    Save a note.

    Returns the new note ID, or None if the note was not saved.
    """
    import asyncio

    from jotter.config import ensure_dirs
    from jotter.session import NoteSession, SaveOutcome

    ensure_dirs()

    async def run() -> int | None:
        session = NoteSession(notify=notice)
        try:
            await session.store.open()
            outcome = await session.save(text)
        finally:
            session.close()
        return session.last_saved_id if outcome is SaveOutcome.SAVED else None

    return asyncio.run(run())


def cmd_capture(text: str) -> int:
    """Save a note and print its ID."""
    try:
        note_id = capture(text)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if note_id is None:
        return 1
    print(note_id)
    return 0


def cmd_list(args: list[str]) -> int:
    """Show notes in the preferred (or given) order."""
    import asyncio

    from jotter.models import parse_directive
    from jotter.session import NoteSession
    from jotter.surfacing import format_display

    directive = None

    # Parse arguments
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--sort", "-s") and i + 1 < len(args):
            try:
                directive = parse_directive(args[i + 1])
            except ValueError:
                print(f"Unknown sort order: {args[i + 1]}", file=sys.stderr)
                return 1
            i += 2
        else:
            i += 1

    async def run() -> int:
        session = NoteSession(notify=notice)
        try:
            if not await session.start():
                return not_logged_in()
            if directive is not None:
                await session.refresh(directive)
            print(format_display(session.display))
            return 0
        finally:
            session.close()

    try:
        return asyncio.run(run())
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_sort(args: list[str]) -> int:
    """Persist the sort preference."""
    import asyncio

    from jotter.models import parse_directive
    from jotter.session import NoteSession

    if not args:
        print("Usage: jotter sort newest|oldest", file=sys.stderr)
        return 1

    try:
        directive = parse_directive(args[0])
    except ValueError:
        print(f"Unknown sort order: {args[0]}", file=sys.stderr)
        return 1

    async def run() -> None:
        session = NoteSession(notify=notice)
        try:
            await session.store.open()
            await session.change_sort(directive)
        finally:
            session.close()

    try:
        asyncio.run(run())
        print(f"Sort: {directive.value}")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_login() -> int:
    """Set the login flag and show the list."""
    import asyncio

    from jotter.session import NoteSession
    from jotter.surfacing import format_display

    async def run() -> None:
        session = NoteSession(notify=notice)
        try:
            await session.store.open()
            await session.login()
            print(format_display(session.display))
        finally:
            session.close()

    try:
        asyncio.run(run())
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_logout() -> int:
    """Clear the login flag, draft and sort preference."""
    import asyncio

    from jotter.session import NoteSession

    async def run() -> None:
        session = NoteSession(notify=notice)
        try:
            await session.logout()
        finally:
            session.close()

    try:
        asyncio.run(run())
        print("Logged out.")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


SHELL_HELP = """Type a note. Each line is added to the input; drafts are kept
automatically. An empty line or :save saves the note.

    :save                 Save the current input
    :sort newest|oldest   Change the display order
    :logout               Log out and leave
    :quit                 Leave (the draft is kept)"""


async def run_shell(
    session: "NoteSession",
    read_line: Callable[[], Awaitable[str | None]],
) -> int:
    """
    Drive the interactive widget.

    ``read_line`` is an async callable returning the next line, or None at
    end of input.
    """
    from jotter.models import parse_directive
    from jotter.surfacing import format_display

    if not await session.start():
        return not_logged_in()

    print(format_display(session.display))
    print(SHELL_HELP)
    if session.input.value:
        print(f"\nRestored draft:\n{session.input.value}")

    while True:
        line = await read_line()
        if line is None or line.strip() in (":quit", ":q"):
            session.flush_draft()
            return 0

        command = line.strip()

        if command == ":logout":
            await session.logout()
            print("Logged out.")
            return 0

        if command.startswith(":sort"):
            try:
                await session.change_sort(parse_directive(command[len(":sort"):]))
            except ValueError:
                print("Usage: :sort newest|oldest", file=sys.stderr)
                continue
            print(format_display(session.display))
            continue

        if command in ("", ":save"):
            before = session.last_saved_id
            await session.save()
            if session.last_saved_id != before:
                print(format_display(session.display))
            continue

        if command == ":help":
            print(SHELL_HELP)
            continue

        text = f"{session.input.value}\n{line}" if session.input.value else line
        session.on_input(text)


def cmd_shell() -> int:
    """Run the interactive widget on stdin/stdout."""
    import asyncio

    from jotter.config import ensure_dirs
    from jotter.session import NoteSession

    ensure_dirs()

    async def read_line() -> str | None:
        try:
            return await asyncio.to_thread(input, "> ")
        except EOFError:
            return None

    async def run() -> int:
        session = NoteSession(notify=notice)
        try:
            return await run_shell(session, read_line)
        finally:
            session.close()

    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_status() -> int:
    """Show status."""
    from jotter.health import format_health_report, run_health_check

    print(format_health_report(run_health_check()))
    return 0


def main() -> int:
    """
    Main entry point.

    Optimized for minimal startup time on the capture path.
    """
    from jotter.config import configure_logging

    configure_logging()
    args = sys.argv[1:]

    # No args - check for piped input
    if not args:
        if not sys.stdin.isatty():
            # Reading from pipe
            text = sys.stdin.read().strip()
            if text:
                return cmd_capture(text)
        print_help()
        return 0

    # Handle flags and commands
    first_arg = args[0]

    if first_arg in ("--help", "-h", "help"):
        print_help()
        return 0

    if first_arg in ("--version", "-v", "version"):
        print_version()
        return 0

    if first_arg == "list":
        return cmd_list(args[1:])

    if first_arg == "sort":
        return cmd_sort(args[1:])

    if first_arg == "shell":
        return cmd_shell()

    if first_arg == "login":
        return cmd_login()

    if first_arg == "logout":
        return cmd_logout()

    if first_arg == "status":
        return cmd_status()

    # Everything else is a note to save
    # Join all args (allows: jotter Buy milk)
    text = " ".join(args)

    if not text.strip():
        print("Error: Empty note", file=sys.stderr)
        return 1

    return cmd_capture(text)


if __name__ == "__main__":
    sys.exit(main())
