"""
Health check module for Jotter.

Reports status of the notes database and the widget state.
"""

import asyncio

from jotter.config import get_db_path, get_state_path, load_config


def check_database() -> tuple[str, str]:
    """Check database status."""
    db_path = get_db_path()
    if not db_path.exists():
        return "-", "Not created yet"

    try:
        from jotter.db import NoteStore
        store = NoteStore(db_path)

        async def count() -> int:
            await store.open()
            try:
                return len(await store.list_all())
            finally:
                store.close()

        total = asyncio.run(count())
        return "✓", f"OK ({total} notes, version {store.version})"
    except Exception as e:
        return "✗", f"Error: {e}"


def check_login() -> tuple[str, str]:
    """Check the login flag."""
    try:
        from jotter.state import KeyValueStore, LoginGate
        gate = LoginGate(KeyValueStore())
        if gate.is_logged_in():
            return "✓", "Logged in"
        return "!", "Logged out (run: jotter login)"
    except Exception as e:
        return "✗", f"Error: {e}"


def check_sort_preference() -> tuple[str, str]:
    """Check the stored sort preference."""
    try:
        from jotter.models import SortDirective
        from jotter.state import KeyValueStore, SortPreferenceStore
        directive = SortPreferenceStore(KeyValueStore()).get()
        if isinstance(directive, SortDirective):
            return "✓", directive.value
        return "!", f"Unknown ({directive}), storage order"
    except Exception as e:
        return "✗", f"Error: {e}"


def check_draft() -> tuple[str, str]:
    """Check for an unsaved draft."""
    if not get_state_path().exists():
        return "✓", "None"

    try:
        from jotter.state import DraftCache, KeyValueStore
        draft = DraftCache(KeyValueStore()).get()
        if not draft:
            return "✓", "None"
        return "!", f"{len(draft)} chars unsaved"
    except Exception as e:
        return "✗", f"Error: {e}"


def run_health_check() -> dict[str, tuple[str, str]]:
    """Run all health checks."""
    return {
        "Database": check_database(),
        "Login": check_login(),
        "Sort": check_sort_preference(),
        "Draft": check_draft(),
    }


def format_health_report(checks: dict[str, tuple[str, str]]) -> str:
    """Format health check results."""
    config = load_config()
    lines = [f"Jotter Status ({config['jotter']['home']})", "-" * 40]

    for name, (status, message) in checks.items():
        lines.append(f"{status} {name}: {message}")

    return "\n".join(lines)
