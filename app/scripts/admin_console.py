"""
Admin console over the HTTP API. Run from project root:
  python -m app.scripts.admin_console login EMAIL PASSWORD
  python -m app.scripts.admin_console users
  python -m app.scripts.admin_console suspend 7 --hours 72
Mutating commands ask for confirmation unless --yes is given. The token is kept
in REPAIRCONNECT_TOKEN_FILE (default ~/.repairconnect_token) and removed on 401.
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Callable

from app.client import (
    SUSPEND_DURATION_OPTIONS,
    ApiError,
    RepairConnectClient,
    SessionExpiredError,
    UserTable,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"


def _token_path() -> Path:
    return Path(
        os.environ.get("REPAIRCONNECT_TOKEN_FILE", "~/.repairconnect_token")
    ).expanduser()


def _load_token(path: Path) -> str | None:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8").strip() or None


def _save_token(path: Path, token: str | None) -> None:
    if token is None:
        path.unlink(missing_ok=True)
        return
    path.write_text(token, encoding="utf-8")
    path.chmod(0o600)


def confirm(prompt: str, assume_yes: bool, ask: Callable[[str], str] = input) -> bool:
    """Ask before a mutating action; only 'y' or 'yes' proceeds."""
    if assume_yes:
        return True
    return ask(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")


def format_table(table: UserTable) -> str:
    header = f"{'ID':>5}  {'NAME':<20}  {'EMAIL':<30}  {'ROLE':<9}  {'STATUS':<9}  SUSPENDED UNTIL"
    lines = [header]
    for row in table.rows:
        lines.append(
            f"{row['id']:>5}  {row['name'][:20]:<20}  {row['email'][:30]:<30}  "
            f"{row['role']:<9}  {row.get('status') or 'active':<9}  "
            f"{row.get('suspended_until') or '-'}"
        )
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RepairConnect admin console.")
    parser.add_argument(
        "--base-url",
        default=os.environ.get("REPAIRCONNECT_API", DEFAULT_BASE_URL),
        help="API base URL",
    )
    parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation prompts")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Log in and store the token")
    login.add_argument("email")
    login.add_argument("password")

    sub.add_parser("logout", help="Forget the stored token")
    sub.add_parser("summary", help="Show the admin summary")
    sub.add_parser("users", help="List users")

    for name in ("delete", "ban", "activate"):
        cmd = sub.add_parser(name, help=f"{name.capitalize()} a user")
        cmd.add_argument("user_id", type=int)

    suspend = sub.add_parser("suspend", help="Suspend a user")
    suspend.add_argument("user_id", type=int)
    suspend.add_argument(
        "--hours", type=int, default=24, choices=SUSPEND_DURATION_OPTIONS
    )
    return parser


def run(args: argparse.Namespace, client: RepairConnectClient) -> int:
    """Execute one command; returns the process exit code."""
    if args.command == "login":
        landing = client.login(args.email, args.password)
        print(f"Logged in; landing page {landing}")
        return 0
    if args.command == "logout":
        client.logout()
        print("Logged out.")
        return 0
    if args.command == "summary":
        data = client.summary()
        print(data["message"])
        for key, value in data["stats"].items():
            print(f"  {key}: {value}")
        return 0
    if args.command == "users":
        print(format_table(client.load_table()))
        return 0

    prompts = {
        "delete": f"Delete user {args.user_id}? This cannot be undone.",
        "ban": f"Permanently ban user {args.user_id}?",
        "activate": f"Reactivate user {args.user_id}?",
        "suspend": f"Suspend user {args.user_id} for {getattr(args, 'hours', 24)} hour(s)?",
    }
    if not confirm(prompts[args.command], args.yes):
        print("Cancelled.")
        return 1

    if args.command == "delete":
        print(f"Deleted user {client.delete_user(args.user_id)}.")
        return 0
    if args.command == "suspend":
        updated = client.suspend_user(args.user_id, args.hours)
    elif args.command == "ban":
        updated = client.ban_user(args.user_id)
    else:
        updated = client.activate_user(args.user_id)
    print(f"User {updated['id']} is now {updated['status']}.")
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.WARNING)
    args = build_parser().parse_args(argv)
    token_path = _token_path()
    with RepairConnectClient(args.base_url, token=_load_token(token_path)) as client:
        try:
            code = run(args, client)
        except SessionExpiredError as e:
            print(f"Session expired ({e.message}); log in again.", file=sys.stderr)
            code = 1
        except ApiError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            code = 1
        _save_token(token_path, client.token)
    return code


if __name__ == "__main__":
    sys.exit(main())
