"""
Django settings for the async ingress controller.
"""
import json
import random
import string
import os.path


def randstr(k):
    return ''.join(random.choices(string.ascii_lowercase + string.digits, k=k))


BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

VERSION = os.environ.get('VERSION', 'dev')

# A boolean that turns on/off debug mode.
# https://docs.djangoproject.com/en/stable/ref/settings/#debug
DEBUG = os.environ.get('ASYNC_INGRESS_DEBUG', 'false').lower() == "true"

TIME_ZONE = os.environ.get('TZ', 'UTC')
USE_TZ = True

INSTALLED_APPS = (
    'reconciler',
)

# no models, the Kubernetes API server is the only store
DATABASES = {}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'async-ingress',
    }
}

# Django secret key
SECRET_KEY = os.environ.get('ASYNC_INGRESS_SECRET_KEY', randstr(64))

# See http://docs.djangoproject.com/en/dev/topics/logging for
# more details on how to customize your logging configuration.
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'root': {'level': 'DEBUG' if DEBUG else 'WARN'},
    'formatters': {
        'verbose': {
            'format': '%(levelname)s %(asctime)s %(module)s %(process)d %(thread)d %(message)s'
        },
        'simple': {
            'format': '%(levelname)s %(message)s'
        },
    },
    'handlers': {
        'null': {
            'level': 'DEBUG',
            'class': 'logging.NullHandler',
        },
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose' if DEBUG else 'simple'
        }
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': True,
        },
        'reconciler': {
            'handlers': ['console'],
            'level': 'DEBUG' if DEBUG else 'INFO',
            'propagate': True,
        },
        'scheduler': {
            'handlers': ['console'],
            'level': 'DEBUG' if DEBUG else 'INFO',
            'propagate': True,
        },
    }
}
TEST_RUNNER = 'reconciler.tests.SilentDjangoTestSuiteRunner'

# default scheduler settings
SCHEDULER_MODULE = 'scheduler'
SCHEDULER_URL = "https://{}:{}".format(
    os.environ.get('KUBERNETES_SERVICE_HOST', 'kubernetes.default'),
    os.environ.get('KUBERNETES_SERVICE_PORT', '443'),
)

K8S_API_VERIFY_TLS = os.environ.get('K8S_API_VERIFY_TLS', 'true').lower() == "true"

# the namespace the async producer and this controller run in
SYSTEM_NAMESPACE = os.environ.get('SYSTEM_NAMESPACE', 'knative-serving')

# suffix of every in-cluster service hostname
CLUSTER_DOMAIN = os.environ.get('CLUSTER_DOMAIN', 'cluster.local')

# ingress class of the networking layer the derived ingresses are handed to
INGRESS_CLASS_NAME = os.environ.get('INGRESS_CLASS_NAME', '')

# ingress class this controller is responsible for
ASYNC_INGRESS_CLASS = os.environ.get(
    'ASYNC_INGRESS_CLASS', 'async.ingress.networking.knative.dev')

# seconds between two passes of the control loop
ASYNC_INGRESS_RESYNC_PERIOD = int(os.environ.get('ASYNC_INGRESS_RESYNC_PERIOD', 30))

# seconds an object read from the API server is served from the cache
ASYNC_INGRESS_CACHE_TIMEOUT = int(os.environ.get('ASYNC_INGRESS_CACHE_TIMEOUT', 30))

# load balancer domains by networking layer, as {"name": {"private": ..., "public": ...}}
ASYNC_INGRESS_LOAD_BALANCERS = {
    "istio": {
        "private": "istio-ingressgateway.istio-system.svc.cluster.local",
        "public": "knative-local-gateway.istio-system.svc.cluster.local",
    },
    "kourier": {
        "private": "kourier.kourier-system.svc.cluster.local",
        "public": "kourier.kourier-system.svc.cluster.local",
    },
}
ASYNC_INGRESS_LOAD_BALANCERS_PATH = os.environ.get(
    'ASYNC_INGRESS_LOAD_BALANCERS_PATH', '/etc/async-ingress/load-balancers.json')
if os.path.exists(ASYNC_INGRESS_LOAD_BALANCERS_PATH):
    with open(ASYNC_INGRESS_LOAD_BALANCERS_PATH) as fd:
        ASYNC_INGRESS_LOAD_BALANCERS = json.load(fd)

# used when the ingress name does not match any known networking layer
ASYNC_INGRESS_DEFAULT_LOAD_BALANCER = {
    "private": os.environ.get(
        'ASYNC_INGRESS_DEFAULT_PRIVATE_DOMAIN',
        'kourier-internal.kourier-system.svc.cluster.local'),
    "public": os.environ.get(
        'ASYNC_INGRESS_DEFAULT_PUBLIC_DOMAIN',
        'kourier.kourier-system.svc.cluster.local'),
}

# ingress class used when INGRESS_CLASS_NAME names an unknown networking layer
ASYNC_INGRESS_DEFAULT_CLASS = os.environ.get(
    'ASYNC_INGRESS_DEFAULT_CLASS', 'kourier.ingress.networking.knative.dev')
