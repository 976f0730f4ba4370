"""Core module - configuration and observability shared by the client and gateway.

SAP-specific logic (credentials, OData envelopes, sales order models) belongs
in /connectors/.
"""

__version__ = "1.0.0"
