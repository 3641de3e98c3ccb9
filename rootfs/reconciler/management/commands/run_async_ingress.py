import time
import logging
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from reconciler.exceptions import AsyncIngressException
from reconciler.reconciler import Reconciler
from reconciler.resources import INGRESS_CLASS_ANNOTATION_KEY
from scheduler.exceptions import KubeException

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Management command running the control loop of the async ingress class.

    Every pass lists the Knative ingresses, reconciles the ones of the async
    ingress class and leaves failed ones to the next pass.
    """

    def add_arguments(self, parser):
        parser.add_argument(
            "--once",
            action="store_true",
            help="run a single pass and exit, failing when an ingress could not be reconciled.",
        )
        parser.add_argument(
            "--resync-period",
            type=int,
            default=None,
            help="seconds to wait between two passes.",
        )
        parser.add_argument(
            "--namespace",
            default=None,
            help="only reconcile the ingresses of this namespace.",
        )

    def is_async(self, ingress):
        metadata = ingress["metadata"]
        annotations = metadata.get("annotations") or {}
        if annotations.get(INGRESS_CLASS_ANNOTATION_KEY) != settings.ASYNC_INGRESS_CLASS:
            return False
        # derived objects are collected through their owner references
        return "deletionTimestamp" not in metadata

    def resync(self, reconciler, namespace=None):
        """Reconcile every async ingress once, return the number of failures."""
        try:
            ingresses = reconciler.scheduler.kingress.get(namespace).json()["items"]
        except (KubeException, ValueError, KeyError) as error:
            logger.error("error listing ingresses: %s", error)
            return 1

        failed = 0
        for ingress in ingresses:
            try:
                if self.is_async(ingress):
                    reconciler.reconcile(ingress)
            except (AsyncIngressException, KubeException) as error:
                failed += 1
                logger.exception(error)
                self.report(ingress, error)
            except Exception as error:
                # a malformed object must not stop the pass
                failed += 1
                logger.exception("unexpected error reconciling ingress")
                self.report(ingress, error)
        return failed

    def report(self, ingress, error):
        metadata = {}
        if isinstance(ingress, dict):
            metadata = ingress.get("metadata") or {}
        self.stderr.write('ERROR: There was a problem reconciling {}/{} '
                          'due to {}'.format(metadata.get("namespace"),
                                             metadata.get("name"), str(error)))

    def handle(self, *args, **options):
        resync_period = options["resync_period"]
        if resync_period is None:
            resync_period = settings.ASYNC_INGRESS_RESYNC_PERIOD
        reconciler = Reconciler()
        while True:
            failed = self.resync(reconciler, options["namespace"])
            if options["once"]:
                if failed:
                    raise CommandError("{} ingress(es) could not be reconciled".format(failed))
                self.stdout.write("Done reconciling async ingresses.")
                return
            time.sleep(resync_period)
