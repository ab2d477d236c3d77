"""
Contact Submission CSV Export

Column order and header names are fixed; dashboards and spreadsheets
downstream rely on them.
"""
import csv

from django.http import HttpResponse
from django.utils import timezone


EXPORT_COLUMNS = [
    'name', 'email', 'subject', 'message', 'status', 'ipAddress',
    'city', 'region', 'country', 'createdAt', 'notes',
]


def submission_row(submission):
    city, region, country = submission.location_parts()
    return [
        submission.name,
        submission.email,
        submission.subject,
        submission.message,
        submission.status,
        submission.ip_address,
        city,
        region,
        country,
        submission.created_at.isoformat(),
        submission.notes,
    ]


def write_submissions_csv(submissions, stream):
    """Write the header row and one row per submission to `stream`."""
    writer = csv.writer(stream)
    writer.writerow(EXPORT_COLUMNS)
    count = 0
    for submission in submissions:
        writer.writerow(submission_row(submission))
        count += 1
    return count


def submissions_csv_response(submissions, prefix='submissions'):
    """HttpResponse carrying the CSV as a file download."""
    response = HttpResponse(content_type='text/csv')
    filename = f"{prefix}_{timezone.now().strftime('%Y%m%d_%H%M%S')}.csv"
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    write_submissions_csv(submissions, response)
    return response
