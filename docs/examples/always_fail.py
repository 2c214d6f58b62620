import asyncio


async def handler():
    await asyncio.sleep(0.1)
    raise RuntimeError("This test will always fail")


module = {
    "id": "alwaysFail",
    "title": "A module which will always fail",
    "frequency": "1m",
    "handler": handler,
}
