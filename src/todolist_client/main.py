"""Command-line interface for browsing the synchronized task list."""

import argparse
import asyncio
import logging
import sys

from .task_sync.api_client import TaskApiClient
from .task_sync.config import DEFAULT_API_BASE_URL, DEFAULT_API_TOKEN
from .task_sync.exceptions import TaskSyncError
from .task_sync.models import Task
from .task_sync.statistics import group_by_project, in_progress_preview, today_summary
from .task_sync.task_store import TaskStore


def format_task(task: Task) -> str:
    """Render one task as a single line."""
    due = task.due_day or "no due date"
    project = task.project_name or "Personal"
    return (
        f"[{task.id}] {task.name} - {task.display_status} ({task.progress}%) "
        f"| {project} | due {due} | {task.priority.value}"
    )


class TaskListCLI:
    """Command-line front end over a TaskStore."""

    def __init__(self, store: TaskStore, token: str | None) -> None:
        """
        Initialize the CLI.

        Args:
            store: Task store to read from
            token: Bearer credential for backend calls
        """
        self._store = store
        self._token = token

    def _print_tasks(self, title: str, tasks: list[Task]) -> None:
        print(f"{title} ({len(tasks)})")
        if not tasks:
            print("  (none)")
            return
        for task in tasks:
            print(f"  {format_task(task)}")

    def show_dashboard(self) -> None:
        """Print today's summary, the in-progress preview and project groups."""
        tasks = self._store.tasks
        summary = today_summary(tasks)
        print(
            f"📅 Today {summary.date}: {summary.completed}/{summary.total} "
            f"completed ({summary.percentage}%)"
        )

        cards = in_progress_preview(tasks)
        print(f"🔄 In progress ({len(cards)})")
        for card in cards:
            print(f"  {card.task.name} - {card.task.progress}%")

        print("📁 Projects")
        for group in group_by_project(tasks):
            print(
                f"  {group.name}: {group.completed}/{group.total} "
                f"({group.percentage}%)"
            )

    async def run(
        self,
        date: str | None = None,
        personal: bool = False,
        dashboard: bool = False,
    ) -> bool:
        """
        Load tasks and print the requested view.

        Returns:
            True on success, False if the backend call failed
        """
        try:
            if date:
                tasks = await self._store.load_for_date(self._token, date)
            else:
                tasks = await self._store.load(self._token)
        except TaskSyncError as e:
            print(f"❌ {e.message}")
            if e.details:
                print(f"   {e.details}")
            return False

        if dashboard:
            self.show_dashboard()
        elif date:
            self._print_tasks(f"Tasks due {self._store.selected_date}", tasks)
        elif personal:
            self._print_tasks("Personal tasks", self._store.personal_tasks)
        else:
            self._print_tasks("Tasks", tasks)
        return True


async def check_backend(base_url: str) -> bool:
    """Probe the backend and print the result."""
    async with TaskApiClient(base_url) as client:
        ok = await client.check_backend()
    if ok:
        print(f"✅ Backend is up at {base_url}")
    else:
        print(f"❌ Backend is not reachable at {base_url}")
    return ok


async def main(
    base_url: str = DEFAULT_API_BASE_URL,
    token: str | None = DEFAULT_API_TOKEN,
    date: str | None = None,
    personal: bool = False,
    dashboard: bool = False,
) -> bool:
    """Main entry point for the CLI application."""
    async with TaskApiClient(base_url) as client:
        cli = TaskListCLI(TaskStore(client), token)
        return await cli.run(date=date, personal=personal, dashboard=dashboard)


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Todolist CLI - Browse tasks synchronized from the todolist backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  todolist                              # List all tasks
  todolist --personal                   # Only tasks without a project
  todolist --date 2024-05-01            # Tasks due on a day
  todolist --dashboard                  # Today's progress and project totals
  todolist --check-backend              # Check that the backend is up
  todolist --verbose                    # Enable verbose logging

The token defaults to the TODOLIST_API_TOKEN environment variable and the
backend URL to TODOLIST_API_BASE_URL.
        """,
    )

    parser.add_argument(
        "--base-url",
        type=str,
        default=DEFAULT_API_BASE_URL,
        metavar="URL",
        help=f"Backend API root (default: {DEFAULT_API_BASE_URL})",
    )

    parser.add_argument(
        "--token",
        type=str,
        default=DEFAULT_API_TOKEN,
        help="Bearer token for the backend (default: $TODOLIST_API_TOKEN)",
    )

    view = parser.add_mutually_exclusive_group()
    view.add_argument(
        "--date",
        type=str,
        default=None,
        metavar="YYYY-MM-DD",
        help="Show tasks due on this day",
    )
    view.add_argument(
        "--personal",
        action="store_true",
        help="Show only personal tasks (tasks without a project)",
    )
    view.add_argument(
        "--dashboard",
        action="store_true",
        help="Show today's completion, in-progress tasks and project totals",
    )

    parser.add_argument(
        "--check-backend",
        action="store_true",
        help="Check that the backend is running and exit",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging and debug information",
    )

    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable trace logging (most verbose, logs every task loaded)",
    )

    return parser


def handle_arguments(args: argparse.Namespace) -> None:
    """
    Configure logging from parsed command-line arguments.

    Args:
        args: Parsed arguments from argparse
    """
    from .task_sync.logging_utils import TRACE_LEVEL, add_trace_level

    add_trace_level()

    if args.trace:
        logging.basicConfig(
            level=TRACE_LEVEL,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        logging.getLogger("httpx").setLevel(logging.DEBUG)
    elif args.verbose:
        logging.basicConfig(
            level="DEBUG", format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        logging.getLogger("httpx").setLevel(logging.INFO)
    else:
        logging.basicConfig(
            level="WARNING", format="%(asctime)s - %(levelname)s - %(message)s"
        )
        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)


def cli_entry_with_args() -> None:
    """CLI entry point with argument parsing."""
    parser = create_argument_parser()

    try:
        args = parser.parse_args()
        handle_arguments(args)

        if args.check_backend:
            ok = asyncio.run(check_backend(args.base_url))
        else:
            ok = asyncio.run(
                main(
                    base_url=args.base_url,
                    token=args.token,
                    date=args.date,
                    personal=args.personal,
                    dashboard=args.dashboard,
                )
            )

        if not ok:
            sys.exit(1)

    except KeyboardInterrupt:
        pass
    except SystemExit:
        # Re-raise SystemExit (from argparse help, etc.)
        raise


if __name__ == "__main__":
    cli_entry_with_args()
