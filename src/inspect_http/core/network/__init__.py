"""Host address discovery and the same-subnet request gate."""

from .resolver import list_external_addresses, resolve_external_address
from .subnet import SubnetFilter

__all__ = ["SubnetFilter", "list_external_addresses", "resolve_external_address"]
