import asyncio


async def handler():
    await asyncio.sleep(0.1)
    return "WARN: This module will always warn"


module = {
    "id": "alwaysWarn",
    "title": "A module which will always signal a warning",
    "frequency": "1m",
    "handler": handler,
}
