"""
Background dispatch of mesh generation.

One generate() call runs per job on an executor and the caller awaits its
single result. The pipeline keeps no state, so jobs need no coordination;
cancelling means abandoning the future and discarding whatever it returns.
"""

import asyncio
from concurrent.futures import Executor
from typing import Any, Dict, List, Mapping, Optional

import structlog

from .core.cells import Mesh
from .core.pipeline import GenerationOptions, generate
from .serialization import mesh_to_payload, options_from_payload

logger = structlog.get_logger()


def handle_request(payload: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    Serve one serialized request.

    Top-level and free of closures so it can be sent to a process pool.
    """
    options = options_from_payload(payload)
    return mesh_to_payload(generate(options))


async def generate_async(options: GenerationOptions, executor: Optional[Executor] = None) -> Mesh:
    """
    Run generate() on ``executor`` (the loop's default thread pool if None).

    Failures propagate unchanged to the awaiting caller.
    """
    loop = asyncio.get_running_loop()
    logger.debug("Dispatching mesh generation", seed=options.seed)
    return await loop.run_in_executor(executor, generate, options)


async def handle_request_async(payload: Mapping[str, Any],
                               executor: Optional[Executor] = None) -> List[Dict[str, Any]]:
    """Serve a serialized request on ``executor``; works with process pools."""
    loop = asyncio.get_running_loop()
    logger.debug("Dispatching serialized mesh request")
    return await loop.run_in_executor(executor, handle_request, payload)
