"""
Management command to create (or reset) a dashboard operator account.

Usage:
    python manage.py create_dashboard_admin --username admin --email admin@panchroma.ca
"""

import getpass
import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

User = get_user_model()


class Command(BaseCommand):
    help = 'Creates a staff user that can sign in to the submissions dashboard'

    def add_arguments(self, parser):
        parser.add_argument('--username', default='admin')
        parser.add_argument('--email', default='admin@panchroma.ca')
        parser.add_argument(
            '--password',
            help='Defaults to $DASHBOARD_ADMIN_PASSWORD, then an interactive prompt'
        )

    def handle(self, *args, **options):
        username = options['username']
        email = options['email'].lower()
        password = options['password'] or os.getenv('DASHBOARD_ADMIN_PASSWORD')
        if not password:
            password = getpass.getpass('Password: ')
        if not password:
            raise CommandError('A password is required.')

        with transaction.atomic():
            user, created = User.objects.get_or_create(
                username=username,
                defaults={'email': email}
            )
            user.email = email
            user.is_staff = True
            user.is_active = True
            user.set_password(password)
            user.save()

        if created:
            self.stdout.write(self.style.SUCCESS(f'✓ Created dashboard operator: {username}'))
        else:
            self.stdout.write(self.style.WARNING(f'User {username} already existed; password and staff flag updated.'))
