class AsyncIngressException(Exception):
    pass


class InvalidModeError(AsyncIngressException):

    def __init__(self, key, value):
        self.key = key
        self.value = value
        super().__init__("Invalid value for key {}: {}".format(key, value))


class ReconcileError(AsyncIngressException):

    def __init__(self, kind, namespace, name, operation, cause):
        self.kind = kind
        self.namespace = namespace
        self.name = name
        self.operation = operation
        super().__init__("failed to {} {} {}/{}: {}".format(
            operation, kind, namespace, name, cause))
