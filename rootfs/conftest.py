import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "reconciler.settings.testing")
django.setup()
