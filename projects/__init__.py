"""
Projects App

Client projects managed from the dashboard, optionally converted from a
contact submission.
"""
