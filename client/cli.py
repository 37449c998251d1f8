"""
Campus FixIt command line client
================================

  campus-fixit register            Create an account (student or admin)
  campus-fixit login               Sign in and store the token locally
  campus-fixit logout              Forget the stored token
  campus-fixit whoami              Show the signed-in user

Students:
  campus-fixit my-issues           List the issues you reported
  campus-fixit issues              List your issues with --category/--status filters
  campus-fixit show ID             Show one of your issues with its remarks
  campus-fixit create              Report a new issue, optionally with --image

Admins:
  campus-fixit admin list          List every issue with optional filters
  campus-fixit admin update ID     Change status and/or add a remark
  campus-fixit admin resolve ID    Mark an issue as resolved
"""

import argparse
import sys

from rich.console import Console
from rich.prompt import Prompt

from client import config
from client.api import ApiClient, ApiError
from client.auth import AuthSession
from client.issues import IssueState
from client.models import CATEGORIES, STATUSES
from client.views import issue_detail, issue_table


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="campus-fixit",
        description="Report and track campus facility issues",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--server-url",
        default=config.API_BASE_URL,
        help=f"API server URL (default: {config.API_BASE_URL})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    register_parser = subparsers.add_parser("register", help="Create an account")
    register_parser.add_argument("--name")
    register_parser.add_argument("--email")
    register_parser.add_argument("--password")
    register_parser.add_argument("--role", choices=["student", "admin"], default="student")

    login_parser = subparsers.add_parser("login", help="Sign in")
    login_parser.add_argument("--email")
    login_parser.add_argument("--password")

    subparsers.add_parser("logout", help="Forget the stored token")
    subparsers.add_parser("whoami", help="Show the signed-in user")

    subparsers.add_parser("my-issues", help="List the issues you reported")

    issues_parser = subparsers.add_parser("issues", help="List your issues with filters")
    issues_parser.add_argument("--category", choices=CATEGORIES)
    issues_parser.add_argument("--status", choices=STATUSES)

    show_parser = subparsers.add_parser("show", help="Show one of your issues")
    show_parser.add_argument("issue_id")

    new_issue_parser = subparsers.add_parser("create", help="Report a new issue")
    new_issue_parser.add_argument("--title", required=True)
    new_issue_parser.add_argument("--description", required=True)
    new_issue_parser.add_argument("--category", required=True, choices=CATEGORIES)
    new_issue_parser.add_argument("--image", help="Path to a photo of the problem")

    admin_parser = subparsers.add_parser("admin", help="Admin commands")
    admin_sub = admin_parser.add_subparsers(dest="admin_command")

    admin_list = admin_sub.add_parser("list", help="List all issues")
    admin_list.add_argument("--category", choices=CATEGORIES)
    admin_list.add_argument("--status", choices=STATUSES)

    admin_update = admin_sub.add_parser("update", help="Update status and/or add a remark")
    admin_update.add_argument("issue_id")
    admin_update.add_argument("--status", choices=STATUSES)
    admin_update.add_argument("--remark")

    admin_resolve = admin_sub.add_parser("resolve", help="Mark an issue as resolved")
    admin_resolve.add_argument("issue_id")

    return parser


def _require_role(session: AuthSession, role: str, console: Console) -> bool:
    if not session.is_authenticated:
        console.print("[red]✗ Authentication required[/red]")
        console.print("Run [cyan]campus-fixit login[/cyan] first.")
        return False
    if session.user.role != role:
        console.print(f"[red]✗ This command is only available to {role}s.[/red]")
        return False
    return True


def _run_register(args, session: AuthSession, console: Console) -> int:
    name = args.name or Prompt.ask("Name", console=console)
    email = args.email or Prompt.ask("Email", console=console)
    password = args.password or Prompt.ask("Password", password=True, console=console)
    user = session.register(name, email, password, args.role)
    console.print(f"[green]✓ Registered as {user.name} ({user.role})[/green]")
    return 0


def _run_login(args, session: AuthSession, console: Console) -> int:
    email = args.email or Prompt.ask("Email", console=console)
    password = args.password or Prompt.ask("Password", password=True, console=console)
    user = session.login(email, password)
    console.print(f"[green]✓ Welcome back, {user.name}![/green]")
    return 0


def _run_logout(session: AuthSession, console: Console) -> int:
    session.logout()
    console.print("Signed out.")
    return 0


def _run_whoami(session: AuthSession, console: Console) -> int:
    if not session.is_authenticated:
        console.print("Not signed in.")
        return 1
    user = session.refresh()
    console.print(f"{user.name} <{user.email}> · {user.role}")
    return 0


def _run_student(args, session: AuthSession, issues: IssueState, console: Console) -> int:
    if not _require_role(session, "student", console):
        return 1

    if args.command == "my-issues":
        console.print(issue_table(issues.fetch_my_issues(), title="My issues"))
    elif args.command == "issues":
        listed = issues.fetch_issues(category=args.category, status=args.status)
        console.print(issue_table(listed, title="My issues"))
    elif args.command == "show":
        console.print(issue_detail(issues.fetch_issue_by_id(args.issue_id)))
    elif args.command == "create":
        issues.create_issue(args.title, args.description, args.category, image_path=args.image)
        console.print("[green]✓ Issue reported[/green]")
        console.print(issue_table(issues.issues, title="My issues"))
    return 0


def _run_admin(args, session: AuthSession, issues: IssueState, console: Console) -> int:
    if not _require_role(session, "admin", console):
        return 1

    if args.admin_command == "list":
        listed = issues.fetch_admin_issues(category=args.category, status=args.status)
        console.print(issue_table(listed, title="All issues", show_reporter=True))
    elif args.admin_command == "update":
        if not args.status and not args.remark:
            console.print("[yellow]Nothing to update: pass --status and/or --remark.[/yellow]")
            return 2
        issues.update_issue(args.issue_id, status=args.status, remark=args.remark)
        console.print("[green]✓ Issue updated[/green]")
        console.print(issue_table(issues.issues, title="All issues", show_reporter=True))
    elif args.admin_command == "resolve":
        issues.resolve_issue(args.issue_id)
        console.print("[green]✓ Issue marked as resolved[/green]")
        console.print(issue_table(issues.issues, title="All issues", show_reporter=True))
    else:
        console.print("Choose an admin command: list, update or resolve.")
        return 2
    return 0


def main(argv: list[str] | None = None, console: Console | None = None, api: ApiClient | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    console = console or Console()

    if args.command is None:
        parser.print_help()
        return 0

    owns_api = api is None
    api = api or ApiClient(base_url=args.server_url)
    session = AuthSession(api)
    session.load()
    issues = IssueState(api)

    try:
        if args.command == "register":
            return _run_register(args, session, console)
        if args.command == "login":
            return _run_login(args, session, console)
        if args.command == "logout":
            return _run_logout(session, console)
        if args.command == "whoami":
            return _run_whoami(session, console)
        if args.command == "admin":
            return _run_admin(args, session, issues, console)
        return _run_student(args, session, issues, console)
    except ApiError as exc:
        console.print(f"[red]✗ {exc.message}[/red]")
        return 1
    finally:
        if owns_api:
            api.close()


if __name__ == "__main__":
    sys.exit(main())
