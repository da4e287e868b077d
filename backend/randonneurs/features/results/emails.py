"""
Result emails.

- Submission request: sent to each rider when their event completes
- ACP summary: sent to the chapter VP when results are submitted

HTML bodies escape every interpolated value; text bodies are sent as-is.
"""

from dataclasses import dataclass
from html import escape
from typing import Optional

from randonneurs.shared.email import EmailMessage
from randonneurs.shared.constants import ResultStatus
from .schemas import ResultSummaryLine


@dataclass
class SubmissionRequestData:
    rider_name: str
    event_name: str
    event_date: str
    event_distance: int
    chapter_name: str
    submission_url: str


def build_result_submission_request_email(data: SubmissionRequestData) -> EmailMessage:
    """Email asking a rider to report their result through their link."""
    subject = f"Submit your result: {data.event_name}"

    text = f"""Hi {data.rider_name},

Thanks for registering for {data.event_name} ({data.event_distance}km) on {data.event_date} with the {data.chapter_name} chapter.

Please let us know how your ride went. Use the link below to submit your finish time, or to tell us you did not finish or did not start:

{data.submission_url}

You can also upload your GPX track and photos of your control card.

The link is personal, please don't share it. You can come back and update your result until the chapter submits results to ACP.

See you on the road,

Randonneurs Ontario
https://randonneursontario.ca"""

    rider = escape(data.rider_name)
    event = escape(data.event_name)
    date = escape(data.event_date)
    distance = escape(str(data.event_distance))
    chapter = escape(data.chapter_name)
    url = escape(data.submission_url)

    html = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <p>Hi {rider},</p>

  <p>Thanks for registering for <strong>{event}</strong> ({distance}km) on {date} with the {chapter} chapter.</p>

  <p>Please let us know how your ride went. Submit your finish time, or tell us you did not finish or did not start:</p>

  <p style="margin: 24px 0;">
    <a href="{url}" style="background: #1f4e79; color: #fff; padding: 12px 20px; text-decoration: none; border-radius: 4px;">Submit my result</a>
  </p>

  <p>Or copy this link into your browser:<br>{url}</p>

  <p>You can also upload your GPX track and photos of your control card.</p>

  <p style="color: #666; font-size: 14px;">The link is personal, please don't share it. You can come back and update your result until the chapter submits results to ACP.</p>

  <p>See you on the road,<br>Randonneurs Ontario</p>
</body>
</html>"""

    return EmailMessage(subject=subject, text=text, html=html)


def _summary_line(line: ResultSummaryLine) -> str:
    status = ResultStatus(line.status)
    text = f"{line.rider_name}: {status.value.upper()}"
    if status is ResultStatus.FINISHED:
        text += f" ({line.finish_time or '-'})"
    if line.notes:
        text += f" | Note: {line.notes}"
    return text


def build_acp_results_summary_email(
    event_name: str,
    event_date: str,
    chapter_name: Optional[str],
    lines: list[ResultSummaryLine],
    submitted_by: Optional[str] = None,
) -> EmailMessage:
    """Plain-text results summary for the VP forwarding results to ACP."""
    chapter = chapter_name or "Unknown"
    subject = f"Results for {event_name} - {event_date} ({chapter} chapter)"

    count = len(lines)
    body = "\n".join(_summary_line(l) for l in lines) if lines else "No results recorded."

    parts = [
        f"Results for {event_name}",
        event_date,
        f"{chapter} chapter",
        "",
    ]
    if submitted_by:
        parts += [f"Submitted by: {submitted_by}", ""]
    parts += [
        "---",
        "",
        f"RESULTS ({count} rider{'' if count == 1 else 's'}):",
        "",
        body,
        "",
        "---",
        "This email was sent from the Randonneurs Ontario admin system.",
    ]
    return EmailMessage(subject=subject, text="\n".join(parts) + "\n")
