"""Relay of object bodies to the HTTP response."""
import logging
from typing import AsyncIterator

from botocore.response import StreamingBody
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


async def relay_object_body(body: StreamingBody, chunk_size: int, object_key: str = "") -> AsyncIterator[bytes]:
    """
    Yield an object body in chunks of at most ``chunk_size`` bytes.

    The next chunk is only read from the store after the server has accepted
    the previous one, so at most one chunk is held in memory. The body is
    closed when the relay finishes, fails, or the client goes away.

    Args:
        body: Unread streaming body returned by ``get_object``
        chunk_size: Upper bound on bytes read per iteration
        object_key: Key being relayed, for logging only

    Yields:
        Successive chunks of the object content
    """
    bytes_sent = 0
    try:
        while True:
            chunk = await run_in_threadpool(body.read, chunk_size)
            if not chunk:
                break
            bytes_sent += len(chunk)
            yield chunk
        logger.info(f"Relayed {bytes_sent} bytes of {object_key}")
    except Exception as e:
        logger.error(f"Relay of {object_key} failed after {bytes_sent} bytes: {str(e)}")
        raise
    finally:
        body.close()
