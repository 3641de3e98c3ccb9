"""
Status conditions of Knative ingresses.
"""
from django.utils import timezone

# ISO-8601 which is used by kubernetes
DATETIME_FORMAT = '%Y-%m-%dT%H:%M:%SZ'

CONDITION_READY = "Ready"
CONDITION_LOAD_BALANCER_READY = "LoadBalancerReady"
CONDITION_NETWORK_CONFIGURED = "NetworkConfigured"
DEPENDENT_CONDITIONS = (CONDITION_LOAD_BALANCER_READY, CONDITION_NETWORK_CONFIGURED)


def get_condition(ingress, condition_type):
    for condition in ingress.get("status", {}).get("conditions", []):
        if condition["type"] == condition_type:
            return condition
    return None


def _set_condition(status, condition_type, value):
    conditions = status.setdefault("conditions", [])
    for condition in conditions:
        if condition["type"] == condition_type:
            if condition.get("status") != value:
                condition["status"] = value
                condition["lastTransitionTime"] = timezone.now().strftime(DATETIME_FORMAT)
            if value == "True":
                condition.pop("reason", None)
                condition.pop("message", None)
            return
    conditions.append({
        "type": condition_type,
        "status": value,
        "lastTransitionTime": timezone.now().strftime(DATETIME_FORMAT),
    })
    conditions.sort(key=lambda condition: condition["type"])


def _update_ready(status):
    values = [
        condition.get("status") for condition in status.get("conditions", [])
        if condition["type"] in DEPENDENT_CONDITIONS
    ]
    if len(values) == len(DEPENDENT_CONDITIONS) and all(v == "True" for v in values):
        _set_condition(status, CONDITION_READY, "True")
    elif "False" in values:
        _set_condition(status, CONDITION_READY, "False")
    else:
        _set_condition(status, CONDITION_READY, "Unknown")


def initialize_conditions(ingress):
    """Set every condition the ingress does not carry yet to Unknown"""
    status = ingress.setdefault("status", {})
    for condition_type in (CONDITION_READY, ) + DEPENDENT_CONDITIONS:
        if get_condition(ingress, condition_type) is None:
            _set_condition(status, condition_type, "Unknown")


def mark_load_balancer_ready(ingress, public_domain, private_domain):
    status = ingress.setdefault("status", {})
    status["publicLoadBalancer"] = {"ingress": [{"domainInternal": public_domain}]}
    status["privateLoadBalancer"] = {"ingress": [{"domainInternal": private_domain}]}
    _set_condition(status, CONDITION_LOAD_BALANCER_READY, "True")
    _update_ready(status)


def mark_network_configured(ingress):
    status = ingress.setdefault("status", {})
    _set_condition(status, CONDITION_NETWORK_CONFIGURED, "True")
    _update_ready(status)


def mark_ingress_ready(ingress, domains):
    """
    Mark ``ingress`` as served by the load balancers of its networking layer.

    Only ``status`` is modified. Calling it again with the same input leaves
    the status untouched, transition times included.
    """
    name = ingress["metadata"]["name"]
    mark_load_balancer_ready(
        ingress,
        domains.domain_for(name, False),
        domains.domain_for(name, True),
    )
    mark_network_configured(ingress)
