"""Cloud Controller client package.

To use the operations facade:
    from cc_client.core.cloud_controller import CloudControllerClient, CloudControllerOperations

To build an authenticated client from environment settings:
    from cc_client.config import build_client
"""
