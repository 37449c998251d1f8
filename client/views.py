"""Terminal rendering for issues: badges, lists and the detail view."""

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from client.models import Issue

STATUS_STYLES = {
    "Open": "bold white on blue",
    "In Progress": "bold black on dark_orange",
    "Resolved": "bold white on green",
}

CATEGORY_ICONS = {
    "Electrical": "⚡",
    "Water": "💧",
    "Internet": "🌐",
    "Infrastructure": "🏗",
}


def status_badge(status: str) -> Text:
    return Text(f" {status} ", style=STATUS_STYLES.get(status, "bold white on grey37"))


def category_badge(category: str) -> Text:
    icon = CATEGORY_ICONS.get(category, "•")
    return Text(f"{icon} {category}", style="cyan")


def format_timestamp(value) -> str:
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%Y-%m-%d %H:%M")


def issue_table(issues: list[Issue], title: str = "Issues", show_reporter: bool = False) -> Table:
    table = Table(title=f"{title} ({len(issues)})", show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Category")
    table.add_column("Status")
    if show_reporter:
        table.add_column("Reported by")
    table.add_column("Remarks", justify="right")
    table.add_column("Created")

    for issue in issues:
        row = [
            issue.id,
            issue.title,
            category_badge(issue.category),
            status_badge(issue.status),
        ]
        if show_reporter:
            row.append(issue.created_by.name or issue.created_by.email)
        row.extend([str(len(issue.remarks)), format_timestamp(issue.created_at)])
        table.add_row(*row)

    return table


def issue_detail(issue: Issue) -> Panel:
    header = Text.assemble(category_badge(issue.category), "  ", status_badge(issue.status))
    parts = [
        header,
        Text(""),
        Text(issue.description),
        Text(""),
        Text(f"Reported by {issue.created_by.name} <{issue.created_by.email}>", style="dim"),
        Text(f"Created {format_timestamp(issue.created_at)} · Updated {format_timestamp(issue.updated_at)}", style="dim"),
    ]
    if issue.image_url:
        parts.append(Text(f"Photo: {issue.image_url}", style="underline blue"))

    if issue.remarks:
        remarks = Table(title="Remarks", show_header=True, expand=True)
        remarks.add_column("When", no_wrap=True)
        remarks.add_column("By")
        remarks.add_column("Remark")
        for remark in issue.remarks:
            remarks.add_row(format_timestamp(remark.added_at), remark.added_by.name, remark.text)
        parts.extend([Text(""), remarks])
    else:
        parts.extend([Text(""), Text("No remarks yet.", style="italic dim")])

    return Panel(Group(*parts), title=issue.title, subtitle=issue.id)
