import os
import pkgutil

from scheduler import KubeHTTPClient, get_k8s_session


class ResourceRegistry(type):
    """
    Keeps track of every concrete Resource so the client can map them to properties
    """
    def __init__(cls, name, bases, attrs):
        if not hasattr(cls, 'plugins'):
            cls.plugins = []
        elif not attrs.get('abstract', False):
            cls.plugins.append(cls)

    def __iter__(cls):
        return iter(cls.plugins)


class Resource(KubeHTTPClient, metaclass=ResourceRegistry):
    abstract = True
    api_version = 'v1'
    api_prefix = 'api'
    short_name = None

    def __init__(self, url, k8s_api_verify_tls=True):
        self.url = url
        self.k8s_api_verify_tls = k8s_api_verify_tls
        self.session = get_k8s_session(self.k8s_api_verify_tls)


# load all the resource modules so they register themselves
for _, modname, _ in pkgutil.iter_modules([os.path.dirname(__file__)]):
    __import__('scheduler.resources.{}'.format(modname))
