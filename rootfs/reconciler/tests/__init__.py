import logging
from copy import deepcopy

from django.test.runner import DiscoverRunner

from reconciler.resources import ASYNC_MODE_ANNOTATION_KEY, INGRESS_CLASS_ANNOTATION_KEY

ASYNC_INGRESS_CLASS = "async.ingress.networking.knative.dev"

PATH = {
    "splits": [{
        "serviceName": "hello-00001",
        "serviceNamespace": "default",
        "servicePort": 80,
        "percent": 100,
    }],
    "appendHeaders": {"Knative-Serving-Revision": "hello-00001"},
}


class SilentDjangoTestSuiteRunner(DiscoverRunner):
    """Prevents log messages from cluttering the console during tests."""

    def run_tests(self, test_labels, **kwargs):
        """Run tests with all but critical log messages disabled."""
        # hide any log messages less than critical
        logging.disable(logging.ERROR)
        return super(SilentDjangoTestSuiteRunner, self).run_tests(
            test_labels, **kwargs)


def make_ingress(name="hello", namespace="default", mode=None, paths=None, **metadata):
    """Knative ingress as created by Knative Serving for a service named ``name``"""
    annotations = {INGRESS_CLASS_ANNOTATION_KEY: ASYNC_INGRESS_CLASS}
    if mode is not None:
        annotations[ASYNC_MODE_ANNOTATION_KEY] = mode
    annotations.update(metadata.pop("annotations", {}))
    data = {
        "apiVersion": "networking.internal.knative.dev/v1alpha1",
        "kind": "Ingress",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": {"serving.knative.dev/service": name},
            "ownerReferences": [{
                "apiVersion": "serving.knative.dev/v1",
                "kind": "Route",
                "name": name,
                "uid": "9c1e4b52-5c2d-4a52-8d2f-0f4a2f1d5b77",
                "controller": True,
                "blockOwnerDeletion": True,
            }],
            "annotations": annotations,
        },
        "spec": {
            "rules": [{
                "hosts": ["{}.{}.example.com".format(name, namespace)],
                "visibility": "ExternalIP",
                "http": {"paths": deepcopy(paths if paths is not None else [PATH])},
            }],
        },
    }
    data["metadata"].update(metadata)
    return data
