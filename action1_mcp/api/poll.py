"""Polling of asynchronous job status."""

import asyncio
import logging
import time
from typing import Any, Dict, Mapping

from ..errors import PollFailure, PollTimeout, UnsupportedOperation
from .client import ApiClient
from .paths import interpolate_path

DEFAULT_INTERVAL = 1.5
DEFAULT_TIMEOUT = 300.0


async def poll_job(
    client: ApiClient,
    job_params: Mapping[str, Any],
    interval: float = DEFAULT_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """Poll the configured job status endpoint until a terminal status

    The deadline is only checked between iterations; a request in flight is
    never interrupted.

    Returns:
        Dict with status, label and the last response data

    Raises:
        UnsupportedOperation: If the API has no job status configuration
        PollFailure: If a failure status was observed
        PollTimeout: If the deadline passed before a terminal status
    """
    config = client.spec.job_status
    if config is None:
        raise UnsupportedOperation("Job polling is not configured for this API.")

    started = time.monotonic()
    path = interpolate_path(config.path_template, job_params)

    while True:
        data = await client.get_with_retry(path)
        status = data.get(config.status_field) if isinstance(data, dict) else None
        label = data.get(config.label_field) if config.label_field and isinstance(data, dict) else None

        if status in config.success_values:
            logging.info(f"[Poll] Job finished with status={status}")
            return {"status": status, "label": label, "data": data}
        if status in config.failure_values:
            raise PollFailure(f"Job failed with status={status}", data)
        if time.monotonic() - started > timeout:
            raise PollTimeout("Polling timeout exceeded", data)

        logging.debug(f"[Poll] status={status}, next check in {interval}s")
        await asyncio.sleep(interval)


__all__ = [
    "DEFAULT_INTERVAL",
    "DEFAULT_TIMEOUT",
    "poll_job",
]
