"""Core client logic.

Module Structure:
    - cloud_controller/ : Cloud Controller v2 API client, pagination, role mapping
                          and the CloudControllerOperations facade
"""
