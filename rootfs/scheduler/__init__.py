from collections import OrderedDict
import logging
import os
import requests
import requests.exceptions
from requests_toolbelt import user_agent
from urllib.parse import urljoin

from reconciler import __version__ as async_ingress_version
from scheduler.exceptions import KubeException, KubeHTTPException  # noqa


logger = logging.getLogger(__name__)
session = None

SERVICE_ACCOUNT_PATH = '/var/run/secrets/kubernetes.io/serviceaccount'


def get_k8s_session(k8s_api_verify_tls):
    global session
    if session is None:
        session = requests.Session()
        session.headers = {
            'Content-Type': 'application/json',
            'User-Agent': user_agent('Async Ingress Controller', async_ingress_version)
        }
        token_path = os.path.join(SERVICE_ACCOUNT_PATH, 'token')
        # outside of a pod there is no service account, rely on the proxy / kubeconfig
        if os.path.exists(token_path):
            with open(token_path) as token_file:
                session.headers['Authorization'] = 'Bearer ' + token_file.read()
        if k8s_api_verify_tls:
            ca_path = os.path.join(SERVICE_ACCOUNT_PATH, 'ca.crt')
            session.verify = ca_path if os.path.exists(ca_path) else True
        else:
            session.verify = False
    return session


class KubeHTTPClient(object):
    api_version = 'v1'
    api_prefix = 'api'

    def __init__(self, url, k8s_api_verify_tls=True):
        self.url = url
        self.k8s_api_verify_tls = k8s_api_verify_tls
        self.session = get_k8s_session(self.k8s_api_verify_tls)
        self.resource_mapping = OrderedDict()

        # map the various k8s Resources to an internal property
        from scheduler.resources import Resource  # lazy load
        for res in Resource:
            name = str(res.__name__).lower()  # singular
            component = name + 's'  # make plural
            # check if component has already been processed
            if component in self.resource_mapping:
                continue

            # get past recursion problems in case of self reference
            self.resource_mapping[component] = ''
            self.resource_mapping[component] = res(self.url, self.k8s_api_verify_tls)
            # map singular Resource name to the plural one
            self.resource_mapping[name] = component
            if res.short_name is not None:
                # map short name to long name so a resource can be named svc
                # but have the main object live at services
                self.resource_mapping[str(res.short_name).lower()] = component

    def api(self, tmpl, *args):
        """Return a fully-qualified Kubernetes API URL from a string template with args."""
        return "/{}/{}".format(self.api_prefix, self.api_version) + tmpl.format(*args)

    def __getattr__(self, name):
        # resources themselves carry no mapping
        resource_mapping = self.__dict__.get('resource_mapping', {})
        if name in resource_mapping:
            # resolve to final name if needed
            component = resource_mapping[name]
            if type(component) is not str:
                # already a component object
                return component

            return resource_mapping[component]

        return object.__getattribute__(self, name)

    @staticmethod
    def unhealthy(status_code):
        return not 200 <= status_code <= 299

    @staticmethod
    def log(namespace, message, level='INFO'):
        """Logs a message in the context of a namespace.

        This prefixes log messages with a namespace "tag" so that every
        message produced while reconciling an ingress can be traced back
        to the namespace it belongs to.
        """
        lvl = getattr(logging, level.upper()) if hasattr(logging, level.upper()) else logging.INFO
        logger.log(lvl, "[{}]: {}".format(namespace, message))

    def http_get(self, path, params=None, **kwargs):
        """
        Make a GET request to the k8s server.
        """
        try:
            url = urljoin(self.url, path)
            response = self.session.get(url, params=params, **kwargs)
        except requests.exceptions.ConnectionError as err:
            # reraise as KubeException, but log stacktrace.
            message = "There was a problem retrieving data from " \
                      "the Kubernetes API server. URL: {}, params: {}".format(url, params)
            logger.error(message)
            raise KubeException(message) from err

        return response

    def http_post(self, path, data=None, json=None, **kwargs):
        """
        Make a POST request to the k8s server.
        """
        try:
            url = urljoin(self.url, path)
            response = self.session.post(url, data=data, json=json, **kwargs)
        except requests.exceptions.ConnectionError as err:
            # reraise as KubeException, but log stacktrace.
            message = "There was a problem posting data to " \
                      "the Kubernetes API server. URL: {}, " \
                      "data: {}, json: {}".format(url, data, json)
            logger.error(message)
            raise KubeException(message) from err

        return response

    def http_put(self, path, data=None, json=None, **kwargs):
        """
        Make a PUT request to the k8s server.
        """
        try:
            url = urljoin(self.url, path)
            response = self.session.put(url, data=data, json=json, **kwargs)
        except requests.exceptions.ConnectionError as err:
            # reraise as KubeException, but log stacktrace.
            message = "There was a problem putting data to " \
                      "the Kubernetes API server. URL: {}, " \
                      "data: {}, json: {}".format(url, data, json)
            logger.error(message)
            raise KubeException(message) from err

        return response


SchedulerClient = KubeHTTPClient
