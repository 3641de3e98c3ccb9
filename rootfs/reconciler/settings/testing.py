from reconciler.settings.production import *  # noqa

DEBUG = True

# scheduler for testing, every request is answered by requests_mock
SCHEDULER_URL = 'http://test-scheduler.example.com'
K8S_API_VERIFY_TLS = False

SYSTEM_NAMESPACE = 'knative-serving'
CLUSTER_DOMAIN = 'cluster.local'
INGRESS_CLASS_NAME = 'kourier.ingress.networking.knative.dev'

# isolate the cache of each test run
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'async-ingress-unittest',
    }
}
