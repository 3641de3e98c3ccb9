"""
The **reconciler** Django app routes Knative ingresses annotated for
asynchronous request handling through the async producer.
"""

__version__ = '0.1.0'
