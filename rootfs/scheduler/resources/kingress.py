from scheduler.exceptions import KubeHTTPException
from scheduler.resources import Resource


class KIngress(Resource):
    """
    Knative networking Ingress, the routing resource served by the ingress plugins.
    """
    api_prefix = 'apis'
    api_version = 'networking.internal.knative.dev/v1alpha1'
    short_name = 'kingress'

    def get(self, namespace=None, name=None):
        """
        Fetch a single Ingress or a list of Ingresses

        Ingresses of every namespace are listed when no namespace is given.
        """
        if name is not None:
            url = self.api("/namespaces/{}/ingresses/{}", namespace, name)
            message = 'get Ingress "{}" in Namespace "{}"'.format(name, namespace)
        elif namespace is not None:
            url = self.api("/namespaces/{}/ingresses", namespace)
            message = 'get Ingresses in Namespace "{}"'.format(namespace)
        else:
            url = self.api("/ingresses")
            message = 'get Ingresses'

        response = self.http_get(url)
        if self.unhealthy(response.status_code):
            raise KubeHTTPException(response, message)

        return response

    def create(self, namespace, name, data):
        url = self.api("/namespaces/{}/ingresses", namespace)
        response = self.http_post(url, json=data)
        if self.unhealthy(response.status_code):
            raise KubeHTTPException(
                response,
                'create Ingress "{}" in Namespace "{}"', name, namespace
            )

        return response

    def update(self, namespace, name, data):
        url = self.api("/namespaces/{}/ingresses/{}", namespace, name)
        response = self.http_put(url, json=data)
        if self.unhealthy(response.status_code):
            raise KubeHTTPException(
                response,
                'update Ingress "{}" in Namespace "{}"', name, namespace
            )

        return response

    def update_status(self, namespace, name, data):
        url = self.api("/namespaces/{}/ingresses/{}/status", namespace, name)
        response = self.http_put(url, json=data)
        if self.unhealthy(response.status_code):
            raise KubeHTTPException(
                response,
                'update status of Ingress "{}" in Namespace "{}"', name, namespace
            )

        return response
