"""
Tests for result email content.
"""

from randonneurs.features.results.emails import (
    SubmissionRequestData,
    build_acp_results_summary_email,
    build_result_submission_request_email,
)
from randonneurs.features.results.schemas import ResultSummaryLine


def request_data(**overrides) -> SubmissionRequestData:
    values = dict(
        rider_name="Ann Lee",
        event_name="Spring 200",
        event_date="May 1, 2026",
        event_distance=200,
        chapter_name="Toronto",
        submission_url="https://example.org/results/submit/abc",
    )
    values.update(overrides)
    return SubmissionRequestData(**values)


# =============================================================================
# Submission Request
# =============================================================================

class TestSubmissionRequestEmail:
    def test_subject_and_link(self):
        message = build_result_submission_request_email(request_data())
        assert message.subject == "Submit your result: Spring 200"
        assert "https://example.org/results/submit/abc" in message.text
        assert 'href="https://example.org/results/submit/abc"' in message.html

    def test_html_escapes_rider_name(self):
        message = build_result_submission_request_email(
            request_data(rider_name="<script>alert(1)</script>")
        )
        assert "<script>" not in message.html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in message.html

    def test_html_escapes_attribute_breakout(self):
        message = build_result_submission_request_email(
            request_data(event_name='"><script>x</script>')
        )
        assert "&quot;&gt;&lt;script&gt;" in message.html
        assert '"><script>' not in message.html

    def test_html_escapes_ampersand_in_url(self):
        message = build_result_submission_request_email(
            request_data(submission_url="https://example.org/r?a=1&b=2")
        )
        assert "https://example.org/r?a=1&amp;b=2" in message.html

    def test_text_body_is_not_escaped(self):
        message = build_result_submission_request_email(request_data(rider_name="Zoë & <Co>"))
        assert "Hi Zoë & <Co>," in message.text


# =============================================================================
# Results Summary
# =============================================================================

class TestResultsSummaryEmail:
    LINES = [
        ResultSummaryLine(rider_name="Ann Lee", status="finished", finish_time="13:30"),
        ResultSummaryLine(rider_name="Bo Chan", status="dnf", notes="Broken spoke"),
    ]

    def test_subject(self):
        message = build_acp_results_summary_email(
            "Spring 200", "Friday, May 1, 2026", "Toronto", self.LINES
        )
        assert message.subject == "Results for Spring 200 - Friday, May 1, 2026 (Toronto chapter)"
        assert message.html is None

    def test_lines(self):
        message = build_acp_results_summary_email("Spring 200", "Friday, May 1, 2026", "Toronto", self.LINES)
        assert "RESULTS (2 riders):" in message.text
        assert "Ann Lee: FINISHED (13:30)" in message.text
        assert "Bo Chan: DNF | Note: Broken spoke" in message.text

    def test_single_rider(self):
        message = build_acp_results_summary_email("Spring 200", "d", "Toronto", self.LINES[:1])
        assert "RESULTS (1 rider):" in message.text

    def test_no_results(self):
        message = build_acp_results_summary_email("Spring 200", "d", None, [])
        assert "No results recorded." in message.text
        assert "(Unknown chapter)" in message.subject

    def test_submitted_by(self):
        message = build_acp_results_summary_email("Spring 200", "d", "Toronto", [], submitted_by="Pat")
        assert "Submitted by: Pat" in message.text

    def test_pending_result_has_no_time(self):
        line = ResultSummaryLine(rider_name="Cy Dee", status="pending")
        message = build_acp_results_summary_email("Spring 200", "d", "Toronto", [line])
        assert "Cy Dee: PENDING\n" in message.text
