"""
Read cache in front of the Kubernetes API server.

Reads are served from the Django cache when possible and may lag behind the
API server for up to ``timeout`` seconds. Writes never go through here, the
caller refreshes the cache with what the API server answered.
"""
import logging

from django.conf import settings
from django.core.cache import cache

from scheduler.exceptions import KubeHTTPException

logger = logging.getLogger(__name__)


class Lister(object):

    def __init__(self, resource, kind, timeout=None):
        self.resource = resource
        self.kind = kind
        if timeout is None:
            timeout = settings.ASYNC_INGRESS_CACHE_TIMEOUT
        self.timeout = timeout

    def cache_key(self, namespace, name):
        return "async-ingress:lister:{}:{}:{}".format(self.kind.lower(), namespace, name)

    def get(self, namespace, name):
        """
        Return ``(obj, found)`` for the object stored under namespace/name.

        A 404 from the API server is reported as ``found=False``, any other
        failure is raised. Cache backends hand out unpickled copies, so the
        returned object never aliases what other readers see.
        """
        key = self.cache_key(namespace, name)
        obj = cache.get(key)
        if obj is not None:
            return obj, True
        try:
            obj = self.resource.get(namespace, name).json()
        except KubeHTTPException as e:
            if e.not_found:
                return None, False
            raise
        cache.set(key, obj, self.timeout)
        return obj, True

    def set(self, obj):
        metadata = obj["metadata"]
        cache.set(self.cache_key(metadata["namespace"], metadata["name"]), obj, self.timeout)

    def forget(self, namespace, name):
        logger.debug("dropping cached %s %s/%s", self.kind, namespace, name)
        cache.delete(self.cache_key(namespace, name))
