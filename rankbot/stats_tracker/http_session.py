import aiohttp


def create_session() -> aiohttp.ClientSession:
    timeout = aiohttp.ClientTimeout(total=30, connect=10, sock_connect=10, sock_read=20)
    connector = aiohttp.TCPConnector(limit=100, ttl_dns_cache=300)
    return aiohttp.ClientSession(
        timeout=timeout,
        connector=connector,
        headers={"Accept": "application/json"}
    )


async def close_session(session: aiohttp.ClientSession | None) -> None:
    if session and not session.closed:
        await session.close()
