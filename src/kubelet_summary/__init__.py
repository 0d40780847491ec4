"""Kubelet Summary Client.

Client for the kubelet ``/stats/summary/`` endpoint that fetches node, pod
and container resource usage from a single node and decodes it into
typed models.
"""

__version__ = "0.1.0"
