import re
import uuid
from copy import deepcopy

import requests_mock
from django.core.cache import cache
from django.test import SimpleTestCase

from reconciler.utils import get_scheduler


class FakeKubeAPI(object):
    """
    In-memory Kubernetes API server plugged into requests_mock as a matcher.

    Only knows the verbs used by the controller: get / list / create / update
    and the status subresource. Every request is recorded in ``calls``.
    """

    PATH = re.compile(
        r'^/(?:api/v1|apis/[^/]+/[^/]+)'
        r'(?:/namespaces/(?P<namespace>[^/]+))?'
        r'/(?P<plural>[a-z]+)'
        r'(?:/(?P<name>[^/]+))?'
        r'(?P<status>/status)?$'
    )

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.failures = {}

    def add(self, plural, obj):
        metadata = obj["metadata"]
        obj = deepcopy(obj)
        obj["metadata"].setdefault("resourceVersion", "1")
        obj["metadata"].setdefault("uid", str(uuid.uuid4()))
        self.objects[(plural, metadata["namespace"], metadata["name"])] = obj
        return deepcopy(obj)

    def get(self, plural, namespace, name):
        return deepcopy(self.objects.get((plural, namespace, name)))

    def fail(self, method, plural, status_code, reason="Internal Server Error"):
        self.failures[(method, plural)] = (status_code, reason)

    def writes(self, plural=None):
        return [
            (method, path) for method, path in self.calls
            if method in ('POST', 'PUT') and (plural is None or '/{}'.format(plural) in path)
        ]

    @staticmethod
    def _status(request, status_code, reason):
        return requests_mock.create_response(
            request,
            status_code=status_code,
            reason=reason,
            json={"kind": "Status", "code": status_code, "message": reason},
        )

    def __call__(self, request):
        match = self.PATH.match(request.path)
        if match is None:
            return None
        self.calls.append((request.method, request.path))
        plural, namespace, name = match.group("plural", "namespace", "name")

        if (request.method, plural) in self.failures:
            return self._status(request, *self.failures[(request.method, plural)])
        handler = getattr(self, "handle_{}".format(request.method.lower()))
        return handler(request, plural, namespace, name, bool(match.group("status")))

    def handle_get(self, request, plural, namespace, name, status):
        if name is None:
            items = [
                deepcopy(obj) for (kind, ns, _), obj in sorted(self.objects.items())
                if kind == plural and namespace in (None, ns)
            ]
            return requests_mock.create_response(
                request, status_code=200, json={"kind": "List", "items": items})
        obj = self.objects.get((plural, namespace, name))
        if obj is None:
            return self._status(request, 404, "Not Found")
        return requests_mock.create_response(request, status_code=200, json=deepcopy(obj))

    def handle_post(self, request, plural, namespace, name, status):
        data = request.json()
        key = (plural, namespace, data["metadata"]["name"])
        if key in self.objects:
            return self._status(request, 409, "Conflict")
        # status is a subresource, it can't be set on creation
        data.pop("status", None)
        data["metadata"]["generation"] = 1
        obj = self.add(plural, data)
        return requests_mock.create_response(request, status_code=201, json=deepcopy(obj))

    def handle_put(self, request, plural, namespace, name, status):
        data = request.json()
        stored = self.objects.get((plural, namespace, name))
        if stored is None:
            return self._status(request, 404, "Not Found")
        version = data["metadata"].get("resourceVersion")
        if version is not None and version != stored["metadata"]["resourceVersion"]:
            return self._status(request, 409, "Conflict")

        obj = deepcopy(stored)
        if status:
            obj["status"] = data.get("status", {})
        else:
            obj["spec"] = data.get("spec", {})
            obj["metadata"]["annotations"] = data["metadata"].get("annotations", {})
            obj["metadata"]["labels"] = data["metadata"].get("labels", {})
            if obj["spec"] != stored.get("spec"):
                obj["metadata"]["generation"] = stored["metadata"].get("generation", 1) + 1
        obj["metadata"]["resourceVersion"] = str(int(stored["metadata"]["resourceVersion"]) + 1)
        self.objects[(plural, namespace, name)] = obj
        return requests_mock.create_response(request, status_code=200, json=deepcopy(obj))


class TestCase(SimpleTestCase):
    """Runs against a fresh FakeKubeAPI and an empty cache"""

    def setUp(self):
        cache.clear()
        self.api = FakeKubeAPI()
        self.mocker = requests_mock.Mocker(case_sensitive=True)
        self.mocker.start()
        self.addCleanup(self.mocker.stop)
        self.mocker.add_matcher(self.api)
        self.scheduler = get_scheduler()
        self.namespace = 'test-{}'.format(uuid.uuid4().hex[:8])
