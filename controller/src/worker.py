"""
Queue worker - pulls build requests from Redis and executes them.
"""

import asyncio
import logging
import redis.asyncio as redis
import json
from typing import Optional, Dict, Any

from controller.src.config import get_settings
from controller.src.errors import BuildConfigError, BuildValidationError
from controller.src.services.build_parser import parse_build_dict
from controller.src.services.executor import build_key, execute_build
from controller.src.services.status_reporter import invalid_build_status, report_build_status

logger = logging.getLogger(__name__)
settings = get_settings()

BUILD_QUEUE = "podline:builds"

async def get_next_build(timeout: int = 5) -> Optional[Dict[str, Any]]:
    """Pull next build request from Redis queue."""
    client = redis.from_url(settings.redis_url, decode_responses=True)
    
    try:
        result = await client.brpop(BUILD_QUEUE, timeout=timeout)
        if result:
            _, build_data = result
            return json.loads(build_data)
        return None
    finally:
        await client.aclose()

async def handle_build_request(request: Dict[str, Any]):
    """Parse and run one build request."""
    if isinstance(request, dict):
        request = {"namespace": settings.k8s_namespace, **request}
    try:
        build = parse_build_dict(request)
    except BuildConfigError as e:
        logger.error(f"Discarding malformed build request: {e}")
        return
    
    key = build_key(build.namespace, build.name)
    logger.info(f"Received build {key}")
    
    try:
        await execute_build(build)
    except BuildValidationError as e:
        logger.error(f"Build {key} is invalid: {e}")
        report_build_status(key, invalid_build_status(e))

async def worker_loop():
    """Main worker loop."""
    logger.info("Worker started, waiting for builds...")
    
    while True:
        try:
            request = await get_next_build()
            
            if request:
                try:
                    await handle_build_request(request)
                except Exception as e:
                    logger.exception(f"Failed to execute build: {e}")
            
        except KeyboardInterrupt:
            logger.info("Worker shutting down...")
            break
        except json.JSONDecodeError as e:
            logger.error(f"Discarding build request that is not JSON: {e}")
        except Exception as e:
            logger.exception(f"Worker error: {e}")
            await asyncio.sleep(5)

def run_worker():
    """Entry point for worker."""
    asyncio.run(worker_loop())
