"""
Django management command to seed roles, platform users and a demo business.

Usage:
    python manage.py seed_tenancy
    python manage.py seed_tenancy --password secret --skip-demo
"""

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.businesses.actions import create_business
from apps.businesses.data import BusinessData
from apps.core.models import Business
from apps.core.services.roles import GLOBAL, RoleStore

PLATFORM_USERS = [
    {'username': 'superadmin', 'email': 'superadmin@app.test', 'role': 'super-admin'},
    {'username': 'admin', 'email': 'admin@app.test', 'role': 'admin'},
    {'username': 'manager', 'email': 'manager@app.test', 'role': 'manager'},
]

DEMO_OWNER = {'username': 'owner', 'email': 'owner@app.test'}
DEMO_BUSINESS = 'Demo Business'


class Command(BaseCommand):
    help = 'Seed global roles, platform users and a demo business with its owner'

    def add_arguments(self, parser):
        parser.add_argument('--password', default='password', help='Password for seeded users')
        parser.add_argument('--skip-demo', action='store_true', help='Do not create the demo business')

    def handle(self, *args, **options):
        roles = RoleStore()
        User = get_user_model()

        with transaction.atomic():
            for name in settings.APP_SETTINGS.tenancy.global_roles:
                roles.ensure_role(name, GLOBAL)
            self.stdout.write(self.style.SUCCESS('Global roles ready'))

            for entry in PLATFORM_USERS:
                user = self._user(User, entry['username'], entry['email'], options['password'])
                roles.grant(user, entry['role'], GLOBAL)
                self.stdout.write(f"  {entry['email']} -> {entry['role']} (global)")

            if options['skip_demo']:
                return

            owner = self._user(User, DEMO_OWNER['username'], DEMO_OWNER['email'], options['password'])
            if Business.objects.filter(owner=owner, name=DEMO_BUSINESS).exists():
                self.stdout.write(self.style.WARNING(f'{DEMO_BUSINESS} already exists, skipping'))
                return

            business = create_business(owner, BusinessData(name=DEMO_BUSINESS))
            self.stdout.write(self.style.SUCCESS(
                f"Created {business.name} (id={business.pk}) owned by {DEMO_OWNER['email']}"
            ))

    def _user(self, User, username, email, password):
        user, created = User.objects.get_or_create(username=username, defaults={'email': email})
        if created:
            user.set_password(password)
            user.save(update_fields=['password'])
        return user
