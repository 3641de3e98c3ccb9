"""
Unit tests for the Knative ingress resource.

Run the tests with './manage.py test scheduler'
"""
from scheduler import KubeHTTPException
from scheduler.tests import TestCase


class KIngressTest(TestCase):
    """Tests scheduler Knative ingress calls"""

    def manifest(self, name):
        return {
            "apiVersion": "networking.internal.knative.dev/v1alpha1",
            "kind": "Ingress",
            "metadata": {"name": name, "namespace": self.namespace},
            "spec": {"rules": [{"hosts": ["{}.example.com".format(name)]}]},
        }

    def test_create(self):
        response = self.scheduler.kingress.create(
            self.namespace, "hello", self.manifest("hello"))
        data = response.json()
        self.assertEqual(response.status_code, 201, data)
        self.assertEqual(data["metadata"]["name"], "hello")
        self.assertEqual(
            self.api.calls[-1],
            ("POST", "/apis/networking.internal.knative.dev/v1alpha1/namespaces/{}/ingresses".format(
                self.namespace)))

    def test_create_failure(self):
        self.scheduler.kingress.create(self.namespace, "hello", self.manifest("hello"))
        with self.assertRaises(KubeHTTPException) as context:
            self.scheduler.kingress.create(self.namespace, "hello", self.manifest("hello"))
        self.assertEqual(
            str(context.exception),
            'failed to create Ingress "hello" in Namespace "{}": 409 Conflict'.format(
                self.namespace))

    def test_get_ingress(self):
        self.scheduler.kingress.create(self.namespace, "hello", self.manifest("hello"))
        response = self.scheduler.kingress.get(self.namespace, "hello")
        data = response.json()
        self.assertEqual(response.status_code, 200, data)
        self.assertEqual(data["kind"], "Ingress")

    def test_get_ingress_failure(self):
        with self.assertRaises(KubeHTTPException) as context:
            self.scheduler.kingress.get(self.namespace, "doesnotexist")
        self.assertTrue(context.exception.not_found)
        self.assertEqual(context.exception.response.status_code, 404)

    def test_get_ingresses(self):
        self.scheduler.kingress.create(self.namespace, "hello", self.manifest("hello"))
        self.api.add("ingresses", {"metadata": {"name": "other", "namespace": "other"}})

        items = self.scheduler.kingress.get(self.namespace).json()["items"]
        self.assertEqual([item["metadata"]["name"] for item in items], ["hello"])

        items = self.scheduler.kingress.get().json()["items"]
        self.assertEqual(len(items), 2, items)
        self.assertEqual(
            self.api.calls[-1],
            ("GET", "/apis/networking.internal.knative.dev/v1alpha1/ingresses"))

    def test_update(self):
        data = self.scheduler.kingress.create(
            self.namespace, "hello", self.manifest("hello")).json()
        data["spec"]["rules"][0]["hosts"] = ["hello.example.org"]
        response = self.scheduler.kingress.update(self.namespace, "hello", data)
        self.assertEqual(response.status_code, 200, response.json())

        data = self.scheduler.kingress.get(self.namespace, "hello").json()
        self.assertEqual(data["spec"]["rules"][0]["hosts"], ["hello.example.org"])

    def test_update_failure(self):
        with self.assertRaises(
            KubeHTTPException,
            msg='failed to update Ingress "foo" in Namespace "{}": 404 Not Found'.format(self.namespace)  # noqa
        ):
            self.scheduler.kingress.update(self.namespace, "foo", self.manifest("foo"))

    def test_update_status(self):
        data = self.scheduler.kingress.create(
            self.namespace, "hello", self.manifest("hello")).json()
        data["status"] = {"conditions": [{"type": "Ready", "status": "True"}]}
        data["spec"] = {}
        self.scheduler.kingress.update_status(self.namespace, "hello", data)

        stored = self.api.get("ingresses", self.namespace, "hello")
        self.assertEqual(stored["status"]["conditions"][0]["status"], "True")
        # the status subresource leaves the spec alone
        self.assertEqual(stored["spec"], self.manifest("hello")["spec"])
        self.assertTrue(self.api.calls[-1][1].endswith("/ingresses/hello/status"))
