from sanity.utils import check_dns, check_http

module = {
    "id": "website",
    "title": "Public website reachability",
    "frequency": "5m",
    "enabled": False,
    "handler": lambda: {
        "dns": check_dns("example.com"),
        "http": check_http("https://example.com/"),
    },
}
