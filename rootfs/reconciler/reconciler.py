import logging
from copy import deepcopy

from django.conf import settings

from reconciler.exceptions import InvalidModeError, ReconcileError
from reconciler.reconcile import reconcile_resource
from reconciler.resources import (
    LoadBalancerDomains, validate_async_mode, make_new_ingress, make_k8s_service,
)
from reconciler.status import initialize_conditions, mark_ingress_ready
from reconciler.utils import get_scheduler
from scheduler.exceptions import KubeException
from scheduler.lister import Lister

logger = logging.getLogger(__name__)


class Reconciler(object):
    """Reconciles Knative ingresses of the async ingress class"""

    def __init__(self, scheduler=None, domains=None):
        self.scheduler = scheduler if scheduler is not None else get_scheduler()
        self.domains = domains if domains is not None else LoadBalancerDomains.from_settings()
        self.ingress_lister = Lister(self.scheduler.kingress, "Ingress")
        self.service_lister = Lister(self.scheduler.svc, "Service")

    @property
    def ingress_class(self):
        return self.domains.resolve_class(settings.INGRESS_CLASS_NAME)

    def reconcile_kind(self, ingress):
        """
        Mark ``ingress`` ready and converge its derived ingress and service.

        The status of ``ingress`` is updated in place, its spec is left alone.
        """
        namespace = ingress["metadata"]["namespace"]
        name = ingress["metadata"]["name"]
        ingress_class = self.ingress_class

        try:
            validate_async_mode(ingress["metadata"].get("annotations"))
        except InvalidModeError as e:
            logger.error("error validating annotations of ingress %s/%s: %s", namespace, name, e)
            raise

        mark_ingress_ready(ingress, self.domains)
        desired = make_new_ingress(ingress, ingress_class)
        initialize_conditions(desired)
        service = make_k8s_service(ingress)

        try:
            reconcile_resource(self.ingress_lister, self.scheduler.kingress, desired, "Ingress")
        except (ReconcileError, KubeException):
            logger.error("error reconciling ingress: %s/%s", namespace, desired["metadata"]["name"])
            raise
        try:
            reconcile_resource(self.service_lister, self.scheduler.svc, service, "Service")
        except (ReconcileError, KubeException):
            logger.error("error reconciling service: %s/%s", namespace, service["metadata"]["name"])
            raise

    def reconcile(self, ingress):
        """
        Run a full cycle for ``ingress`` and persist its status when it changed.
        """
        namespace = ingress["metadata"]["namespace"]
        name = ingress["metadata"]["name"]
        before = deepcopy(ingress.get("status"))

        self.reconcile_kind(ingress)

        generation = ingress["metadata"].get("generation")
        if generation is not None:
            ingress["status"]["observedGeneration"] = generation
        if ingress.get("status") != before:
            self.scheduler.kingress.update_status(namespace, name, ingress)
            self.scheduler.kingress.log(namespace, "Ingress {} is ready".format(name))
        return ingress
