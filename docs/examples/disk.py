from pathlib import Path

from sanity.utils import check_disk

module = {
    "id": "disk",
    "title": "Primary system disk checks",
    "frequency": "10m",
    "handler": lambda: check_disk(Path(__file__).parent, min_free=10, writable=True),
}
