import asyncio


async def handler():
    await asyncio.sleep(0.1)
    return "Hello World!"


module = {
    "id": "helloWorld",
    "title": "Hello World module",
    "frequency": "1m",
    "handler": handler,
}
