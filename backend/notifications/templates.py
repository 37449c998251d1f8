"""Email rendering for issue status updates."""

from dataclasses import dataclass
from html import escape

from backend.notifications.events import StatusUpdateEvent

STATUS_COLORS = {
    "Open": "#3B82F6",
    "In Progress": "#F59E0B",
    "Resolved": "#10B981",
}
DEFAULT_STATUS_COLOR = "#6B7280"

_STYLE = """
    body { font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6;
           color: #333; background-color: #f4f4f5; margin: 0; padding: 0; }
    .container { max-width: 600px; margin: 20px auto; background-color: #ffffff; border-radius: 8px;
                 overflow: hidden; box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1); }
    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: #ffffff;
              padding: 30px; text-align: center; }
    .header h1 { margin: 0; font-size: 24px; font-weight: 600; }
    .content { padding: 30px; }
    .issue-title { font-size: 18px; font-weight: 600; color: #1f2937; margin-bottom: 10px; }
    .issue-detail { margin: 8px 0; font-size: 14px; }
    .label { color: #6b7280; font-weight: 500; }
    .value { color: #1f2937; font-weight: 600; }
    .remark-section { margin-top: 20px; padding: 15px; background-color: #eff6ff; border-radius: 4px;
                      border-left: 3px solid #3b82f6; }
    .remark-title { font-size: 14px; font-weight: 600; color: #1e40af; margin-bottom: 8px; }
    .footer { background-color: #f9fafb; padding: 20px 30px; text-align: center; font-size: 12px;
              color: #6b7280; border-top: 1px solid #e5e7eb; }
"""


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


def _detail(label: str, value_html: str) -> str:
    return (
        '<div class="issue-detail">'
        f'<span class="label">{label}:</span> {value_html}'
        '</div>'
    )


def render_status_update(event: StatusUpdateEvent) -> RenderedEmail:
    """Render the subject, HTML body and plain-text body for ``event``.

    The previous status is shown only when it differs from the new one; the
    admin name and remark only when present.
    """
    status_color = STATUS_COLORS.get(event.new_status, DEFAULT_STATUS_COLOR)
    show_old_status = bool(event.old_status) and event.old_status != event.new_status
    remark = (event.remark or "").strip()

    details = [
        _detail("Category", f'<span class="value">{escape(event.issue_category)}</span>'),
        _detail(
            "Status",
            '<span style="display:inline-block;padding:4px 12px;border-radius:12px;font-size:12px;'
            f'font-weight:600;color:#ffffff;background-color:{status_color};">'
            f'{escape(event.new_status)}</span>',
        ),
    ]
    text_lines = [
        f"Hi {event.student_name},",
        "",
        "Your reported issue has been updated by our admin team.",
        "",
        f"Issue: {event.issue_title}",
        f"Category: {event.issue_category}",
        f"Status: {event.new_status}",
    ]

    if show_old_status:
        details.append(_detail("Previous Status", f'<span class="value">{escape(event.old_status)}</span>'))
        text_lines.append(f"Previous Status: {event.old_status}")

    if event.admin_name:
        details.append(_detail("Updated By", f'<span class="value">{escape(event.admin_name)}</span>'))
        text_lines.append(f"Updated By: {event.admin_name}")

    remark_html = ""
    if remark:
        remark_html = (
            '<div class="remark-section">'
            '<div class="remark-title">Admin Remark:</div>'
            f'<div class="remark-text">{escape(remark)}</div>'
            '</div>'
        )
        text_lines.extend(["", f"Admin Remark: {remark}"])

    text_lines.extend([
        "",
        "Thank you for using Campus FixIt. We're working hard to resolve your issue!",
    ])

    html = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>{_STYLE}</style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>Campus FixIt</h1></div>
    <div class="content">
      <p>Hi {escape(event.student_name)},</p>
      <p>Your reported issue has been updated by our admin team.</p>
      <div class="issue-card" style="background-color:#f9fafb;border-left:4px solid {status_color};padding:20px;margin:20px 0;border-radius:4px;">
        <div class="issue-title">{escape(event.issue_title)}</div>
        {''.join(details)}
        {remark_html}
      </div>
      <p>Thank you for using Campus FixIt. We're working hard to resolve your issue!</p>
    </div>
    <div class="footer">
      <p><strong>Campus FixIt</strong></p>
      <p>This is an automated notification. Please do not reply to this email.</p>
    </div>
  </div>
</body>
</html>
"""

    return RenderedEmail(
        subject=f"Issue Update: {event.issue_title} is now {event.new_status}",
        html=html,
        text="\n".join(text_lines),
    )
