"""
REPL (Read-Eval-Print Loop) for browsing buckets interactively.

Queries go through the same API action and formatter the special page uses,
so the shell is a quick way to check how a bucket will render.
"""

import logging
import shlex
import sys
from typing import List, Optional

from .api.dispatcher import ApiDispatcher
from .api.memory import DEFAULT_LIMIT, BucketStore, register_store
from .formatter import format_text_table, get_result_table
from .query import QueryResult, run_query
from .utils.exceptions import BucketError

logger = logging.getLogger(__name__)


def read_line_raw(prompt):
    """Read a line using raw stdin to avoid readline interference."""
    sys.stdout.write(prompt)
    sys.stdout.flush()
    line = sys.stdin.readline()
    if not line:  # EOF
        raise EOFError()
    return line.rstrip('\n\r')


def print_banner():
    """Print welcome banner."""
    print("=" * 60)
    print("  Bucket Shell - Interactive Bucket Browser")
    print("=" * 60)
    print("Commands:")
    print("  .load FILE          - Load buckets from a JSON file")
    print("  .buckets            - List all buckets")
    print("  .query NAME [SELECT] [WHERE]")
    print("  .help               - Show help")
    print("  .exit or .quit      - Exit shell")
    print("=" * 60)
    print()


def print_help():
    """Print help message."""
    print("\n--- Help ---")
    print("Queries:")
    print("  .query NAME                 - All fields of bucket NAME")
    print("  .query NAME 'a, b'          - Only fields a and b")
    print("  .query NAME * '{\"a\": 1}'    - Rows where field a equals 1")
    print("\nPaging:")
    print("  .limit N   - Set page size and rerun")
    print("  .offset N  - Jump to offset and rerun")
    print("  .next / .prev - Move one page")
    print("\nOther Commands:")
    print("  .load FILE   - Load buckets from a JSON file")
    print("  .buckets     - List all buckets")
    print("  .schema NAME - Show schema for bucket NAME")
    print("  .wiki        - Print the last result as wikitext")
    print("  .help        - Show this help")
    print("  .exit / .quit - Exit shell")
    print()


class ShellState:
    """Current query and paging position of the shell."""

    def __init__(self, store: BucketStore, dispatcher: ApiDispatcher):
        self.store = store
        self.dispatcher = dispatcher
        self.bucket: Optional[str] = None
        self.select = '*'
        self.where = ''
        self.limit = DEFAULT_LIMIT
        self.offset = 0
        self.last_result: Optional[QueryResult] = None

    def run(self) -> QueryResult:
        """Run the current query and remember its result."""
        if not self.bucket:
            raise BucketError("No query yet. Use .query NAME first")
        self.last_result = run_query({}, self.bucket, self.select, self.where,
                                     self.limit, self.offset, dispatcher=self.dispatcher)
        return self.last_result


def _parse_count(args: List[str], usage: str) -> Optional[int]:
    if len(args) != 1 or not args[0].isdigit():
        print(f"Usage: {usage}")
        return None
    return int(args[0])


def _show(result: QueryResult, state: ShellState) -> None:
    print(format_text_table(result.schema, result.fields, result.rows))
    more = ", more available (.next)" if result.has_next else ""
    print(f"[offset {state.offset}, limit {state.limit}{more}]\n")


def handle_command(command: str, state: ShellState) -> bool:
    """
    Handle a shell command (starting with .).

    Args:
        command: Command line
        state: Shell state

    Returns:
        True if should continue REPL, False to exit

    Raises:
        BucketError: If a query fails
    """
    try:
        parts = shlex.split(command)
    except ValueError as e:
        print(f"Could not parse command: {e}\n")
        return True
    name, args = parts[0].lower(), parts[1:]

    if name in ['.exit', '.quit']:
        print("Goodbye!")
        return False

    elif name == '.help':
        print_help()

    elif name == '.load':
        if len(args) != 1:
            print("Usage: .load FILE")
        else:
            state.store.load_json(args[0])
            print(f"Loaded {args[0]}\n")

    elif name == '.buckets':
        buckets = state.store.list_buckets()
        if buckets:
            print("\nBuckets:")
            for bucket in buckets:
                row_count = state.store.get_bucket(bucket).row_count()
                print(f"  - {bucket} ({row_count} rows)")
        else:
            print("\nNo buckets.")
        print()

    elif name == '.schema':
        if len(args) != 1:
            print("Usage: .schema NAME")
        else:
            bucket = state.store.get_bucket(args[0])
            print(f"\nSchema for bucket '{bucket.name}':")
            for column in bucket.schema:
                suffix = '[]' if column.repeated else ''
                print(f"  {column.name}: {column.type_name}{suffix}")
            print()

    elif name == '.query':
        if not args or len(args) > 3:
            print("Usage: .query NAME [SELECT] [WHERE]")
        else:
            state.bucket = args[0]
            state.select = args[1] if len(args) > 1 else '*'
            state.where = args[2] if len(args) > 2 else ''
            state.offset = 0
            _show(state.run(), state)

    elif name == '.limit':
        limit = _parse_count(args, ".limit N")
        if limit is not None:
            state.limit = limit
            _show(state.run(), state)

    elif name == '.offset':
        offset = _parse_count(args, ".offset N")
        if offset is not None:
            state.offset = offset
            _show(state.run(), state)

    elif name == '.next':
        if state.last_result is not None and not state.last_result.has_next:
            print("Already at the last page.\n")
        else:
            state.offset += state.limit
            _show(state.run(), state)

    elif name == '.prev':
        if state.offset == 0:
            print("Already at the first page.\n")
        else:
            state.offset = max(0, state.offset - state.limit)
            _show(state.run(), state)

    elif name == '.wiki':
        if state.last_result is None:
            print("No result yet.\n")
        else:
            result = state.last_result
            print(get_result_table(result.schema, result.fields, result.rows))
            print()

    else:
        print(f"Unknown command: {name}")
        print("Type .help for available commands\n")

    return True


def repl(store: Optional[BucketStore] = None):
    """
    Run the interactive shell.

    Reads commands, runs queries through the bucket API action, and
    displays results.
    """
    print_banner()

    dispatcher = ApiDispatcher()
    state = ShellState(register_store(dispatcher, store), dispatcher)

    while True:
        try:
            try:
                line = read_line_raw("bucket> ").strip()
            except EOFError:
                print("\nGoodbye!")
                return

            if not line:
                continue

            if not line.startswith('.'):
                print("Commands start with '.'; type .help for help\n")
                continue

            try:
                if not handle_command(line, state):
                    break
            except BucketError as e:
                logger.warning("Command failed: %s", e)
                print(f"Error: {e}\n")
            except (OSError, ValueError) as e:
                # unreadable or malformed fixture file
                print(f"Error: {e}\n")

        except KeyboardInterrupt:
            print("\n\nInterrupted. Type .exit to quit.\n")
            continue


def main(argv: Optional[List[str]] = None):
    """Entry point: optional fixture files to load before starting."""
    argv = sys.argv[1:] if argv is None else argv
    store = BucketStore()
    for path in argv:
        store.load_json(path)
    repl(store)


# Entry point for running as module
if __name__ == "__main__":
    main()
