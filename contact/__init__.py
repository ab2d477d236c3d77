"""
Contact Management App

Handles contact form submissions from the public website:
- Public contact form submission with rate limiting
- IP address and location enrichment
- Dashboard search, triage, notes and bulk operations
- CSV export
- Staff email notifications
"""
