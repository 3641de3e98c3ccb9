"""
Helper functions used by the async ingress controller.
"""
import hashlib
from importlib import import_module

from django.conf import settings

# longest name Kubernetes accepts for most objects
NAME_MAX_LENGTH = 63


def get_scheduler():
    return import_module(settings.SCHEDULER_MODULE).SchedulerClient(
        settings.SCHEDULER_URL, settings.K8S_API_VERIFY_TLS)


def service_hostname(name, namespace):
    """
    Return the fully qualified in-cluster hostname of a service.

    >>> service_hostname('async-producer', 'knative-serving')
    'async-producer.knative-serving.svc.cluster.local'
    """
    return "{}.{}.svc.{}".format(name, namespace, settings.CLUSTER_DOMAIN)


def child_name(parent, suffix):
    """
    Return the name of an object derived from ``parent``.

    Names that would exceed the Kubernetes limit keep a prefix of the parent
    and the md5 of the full parent name, so they stay unique and stable.
    """
    if len(parent) + len(suffix) <= NAME_MAX_LENGTH:
        return parent + suffix
    digest = hashlib.md5(parent.encode('utf-8')).hexdigest()
    head = NAME_MAX_LENGTH - len(suffix) - len(digest)
    return parent[:max(head, 0)] + digest + suffix
