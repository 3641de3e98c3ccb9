"""
Idempotent get / create / update convergence shared by every derived object.
"""
import logging
from copy import deepcopy

from reconciler.exceptions import ReconcileError
from scheduler.exceptions import KubeException

logger = logging.getLogger(__name__)


def _annotations(obj):
    return obj["metadata"].get("annotations") or {}


def differs(current, desired):
    return current.get("spec") != desired.get("spec") or \
        _annotations(current) != _annotations(desired)


def reconcile_resource(lister, resource, desired, kind):
    """
    Converge the object stored under the name of ``desired`` to ``desired``.

    Creates the object when the lister cannot find it, updates spec and
    annotations when they drifted and does nothing otherwise. Returns the
    object as stored afterwards. Lookup failures are raised as is, failed
    writes as ReconcileError. Nothing is retried here.
    """
    namespace = desired["metadata"]["namespace"]
    name = desired["metadata"]["name"]

    current, found = lister.get(namespace, name)
    if not found:
        resource.log(namespace, "{} {} does not exist; creating.".format(kind, name))
        try:
            obj = resource.create(namespace, name, desired).json()
        except KubeException as e:
            raise ReconcileError(kind, namespace, name, "create", e) from e
        lister.set(obj)
        resource.log(namespace, "Created {} {}".format(kind, name))
        return obj

    if not differs(current, desired):
        logger.debug("%s %s/%s is up to date", kind, namespace, name)
        return current

    # don't modify the cached copy
    origin = deepcopy(current)
    origin["spec"] = deepcopy(desired["spec"])
    origin["metadata"]["annotations"] = deepcopy(_annotations(desired))
    try:
        obj = resource.update(namespace, name, origin).json()
    except KubeException as e:
        # most likely a conflict, read it again on the next pass
        lister.forget(namespace, name)
        raise ReconcileError(kind, namespace, name, "update", e) from e
    lister.set(obj)
    resource.log(namespace, "Updated {} {}".format(kind, name))
    return obj
