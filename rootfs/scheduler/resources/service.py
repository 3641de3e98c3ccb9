from scheduler.exceptions import KubeHTTPException
from scheduler.resources import Resource


class Service(Resource):
    short_name = 'svc'

    def get(self, namespace, name=None):
        """
        Fetch a single Service or a list
        """
        url = '/namespaces/{}/services'
        args = [namespace]
        if name is not None:
            args.append(name)
            url += '/{}'
            message = 'get Service "{}" in Namespace "{}"'
        else:
            message = 'get Services in Namespace "{}"'

        url = self.api(url, *args)
        response = self.http_get(url)
        if self.unhealthy(response.status_code):
            args.reverse()  # error msg is in reverse order
            raise KubeHTTPException(response, message, *args)

        return response

    def create(self, namespace, name, data):
        url = self.api("/namespaces/{}/services", namespace)
        response = self.http_post(url, json=data)
        if self.unhealthy(response.status_code):
            raise KubeHTTPException(
                response,
                'create Service "{}" in Namespace "{}"', name, namespace
            )

        return response

    def update(self, namespace, name, data):
        url = self.api("/namespaces/{}/services/{}", namespace, name)
        response = self.http_put(url, json=data)
        if self.unhealthy(response.status_code):
            raise KubeHTTPException(
                response,
                'update Service "{}" in Namespace "{}"', name, namespace
            )

        return response
