"""Ready-made check helpers for use inside module handlers."""

from sanity.utils.disk import check_disk
from sanity.utils.net import check_dns, check_http, check_tcp

__all__ = ["check_disk", "check_dns", "check_http", "check_tcp"]
