class KubeException(Exception):
    def __init__(self, *args, **kwargs):
        Exception.__init__(self, *args, **kwargs)


class KubeHTTPException(KubeException):
    def __init__(self, response, errmsg, *args, **kwargs):
        self.response = response

        msg = errmsg.format(*args)
        msg = 'failed to {}: {} {}'.format(msg, response.status_code, response.reason)
        KubeException.__init__(self, msg, **kwargs)

    @property
    def not_found(self):
        return self.response.status_code == 404
