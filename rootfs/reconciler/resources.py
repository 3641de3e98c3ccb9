"""
Desired state of the objects derived from an async ingress.

Everything in here is pure: the functions take the original Knative ingress
(a Kubernetes JSON manifest) and return new manifests, they never touch the
API server and never modify their input.
"""
from collections import namedtuple
from copy import deepcopy
from types import MappingProxyType

from django.conf import settings

from reconciler.exceptions import InvalidModeError
from reconciler.utils import child_name, service_hostname
from scheduler.resources.kingress import KIngress

ASYNC_MODE_ANNOTATION_KEY = "async.knative.dev/mode"
ASYNC_ALWAYS_MODE = "always.async.knative.dev"
ASYNC_CONDITIONAL_MODE = "conditional.async.knative.dev"

INGRESS_CLASS_ANNOTATION_KEY = "networking.knative.dev/ingress.class"
LAST_APPLIED_CONFIG_ANNOTATION = "kubectl.kubernetes.io/last-applied-configuration"

ASYNC_SUFFIX = "-async"
NEW_SUFFIX = "-new"

PREFER_HEADER_FIELD = "Prefer"
PREFER_ASYNC_VALUE = "respond-async"
PREFER_SYNC_VALUE = "respond-sync"
ASYNC_ORIGINAL_HOST_HEADER = "Async-Original-Host"

PRODUCER_SERVICE_NAME = "async-producer"
PRODUCER_TARGET_PORT = 80

PROTOCOL_HTTP1 = "http1"
PROTOCOL_H2C = "h2c"
SERVICE_PORT_NAMES = {PROTOCOL_HTTP1: "http", PROTOCOL_H2C: "http2"}
SERVICE_PORTS = {PROTOCOL_HTTP1: 80, PROTOCOL_H2C: 81}


def validate_async_mode(annotations):
    """
    Raise InvalidModeError unless the async mode annotation is unset, empty,
    always or conditional.
    """
    mode = (annotations or {}).get(ASYNC_MODE_ANNOTATION_KEY, "")
    if mode and mode not in (ASYNC_ALWAYS_MODE, ASYNC_CONDITIONAL_MODE):
        raise InvalidModeError(ASYNC_MODE_ANNOTATION_KEY, mode)


LoadBalancerDomain = namedtuple('LoadBalancerDomain', ['private', 'public'])


class LoadBalancerDomains(object):
    """
    Read-only table of the load balancer domains of each networking layer.

    Keys are the first label of an ingress class or ingress name,
    e.g. ``kourier`` for ``kourier.ingress.networking.knative.dev``.
    """

    def __init__(self, load_balancers, default, default_class):
        self._load_balancers = MappingProxyType({
            key: LoadBalancerDomain(value["private"], value["public"])
            for key, value in load_balancers.items()
        })
        self.default = LoadBalancerDomain(default["private"], default["public"])
        self.default_class = default_class

    @classmethod
    def from_settings(cls):
        return cls(
            settings.ASYNC_INGRESS_LOAD_BALANCERS,
            settings.ASYNC_INGRESS_DEFAULT_LOAD_BALANCER,
            settings.ASYNC_INGRESS_DEFAULT_CLASS,
        )

    @staticmethod
    def key(name):
        return name.split(".")[0]

    def __contains__(self, name):
        return self.key(name) in self._load_balancers

    def lookup(self, name):
        return self._load_balancers.get(self.key(name), self.default)

    def domain_for(self, name, private):
        domain = self.lookup(name)
        return domain.private if private else domain.public

    def resolve_class(self, ingress_class):
        if ingress_class and ingress_class in self:
            return ingress_class
        return self.default_class


def producer_hostname():
    return service_hostname(PRODUCER_SERVICE_NAME, settings.SYSTEM_NAMESPACE)


def _async_path(name, namespace, splits, path=None):
    """Path sending the request to the async producer"""
    if path is None:
        data = {"headers": {PREFER_HEADER_FIELD: {"exact": PREFER_ASYNC_VALUE}}}
    else:
        # catch-all: keeps the path prefix but none of the header matches
        data = {k: v for k, v in path.items() if k != "headers"}
    data.update({
        "splits": deepcopy(splits),
        "appendHeaders": {ASYNC_ORIGINAL_HOST_HEADER: service_hostname(name, namespace)},
        "rewriteHost": producer_hostname(),
    })
    return data


def _sync_path(path):
    """Original path, only taken when the client explicitly asks for a synchronous answer"""
    data = deepcopy(path)
    headers = data.get("headers") or {}
    headers[PREFER_HEADER_FIELD] = {"exact": PREFER_SYNC_VALUE}
    data["headers"] = headers
    return data


def make_new_ingress(ingress, ingress_class):
    """
    Build the ingress routing the traffic of ``ingress`` through the async producer.

    In always mode every path becomes a pair: the original path guarded by
    ``Prefer: respond-sync`` followed by a catch-all async path. Otherwise a
    single async path guarded by ``Prefer: respond-async`` is put in front of
    the original paths. Rules without paths are dropped.
    """
    original = deepcopy(ingress)
    metadata = original["metadata"]
    name, namespace = metadata["name"], metadata["namespace"]
    annotations = metadata.get("annotations") or {}
    splits = [{
        "serviceName": child_name(name, ASYNC_SUFFIX),
        "serviceNamespace": namespace,
        "servicePort": 80,
        "percent": 100,
    }]

    rules = []
    for rule in original.get("spec", {}).get("rules") or []:
        paths = (rule.get("http") or {}).get("paths") or []
        if not paths:
            continue
        if annotations.get(ASYNC_MODE_ANNOTATION_KEY) == ASYNC_ALWAYS_MODE:
            new_paths = []
            for path in paths:
                new_paths.append(_sync_path(path))
                new_paths.append(_async_path(name, namespace, splits, path))
        else:
            new_paths = [_async_path(name, namespace, splits)] + paths
        # emitted once per rule, after all of its paths were rewritten
        new_rule = dict(rule)
        new_rule["http"] = dict(rule["http"], paths=new_paths)
        rules.append(new_rule)

    new_annotations = {
        key: value for key, value in annotations.items()
        if key != LAST_APPLIED_CONFIG_ANNOTATION
    }
    new_annotations[INGRESS_CLASS_ANNOTATION_KEY] = ingress_class

    data = {
        "apiVersion": KIngress.api_version,
        "kind": "Ingress",
        "metadata": {
            "name": name + NEW_SUFFIX,
            "namespace": namespace,
            "annotations": new_annotations,
        },
        "spec": {
            "rules": rules,
        }
    }
    if "labels" in metadata:
        data["metadata"]["labels"] = metadata["labels"]
    if "ownerReferences" in metadata:
        data["metadata"]["ownerReferences"] = metadata["ownerReferences"]
    return data


def make_k8s_service(ingress):
    """ExternalName service aliasing the async producer, named after the ingress"""
    metadata = ingress["metadata"]
    data = {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {
            "name": child_name(metadata["name"], ASYNC_SUFFIX),
            "namespace": metadata["namespace"],
        },
        "spec": {
            "type": "ExternalName",
            "externalName": producer_hostname(),
            "ports": [{
                "name": SERVICE_PORT_NAMES[PROTOCOL_HTTP1],
                "protocol": "TCP",
                "port": SERVICE_PORTS[PROTOCOL_HTTP1],
                "targetPort": PRODUCER_TARGET_PORT,
            }],
            "selector": {"app": PRODUCER_SERVICE_NAME},
            "sessionAffinity": "None",
        }
    }
    if "ownerReferences" in metadata:
        data["metadata"]["ownerReferences"] = deepcopy(metadata["ownerReferences"])
    return data
