import time
from typing import Callable

from fastapi import Request, Response
from fastapi.routing import APIRoute
from starlette.background import BackgroundTask, BackgroundTasks

from dms.lib.logging.canonical import log_request
from dms.lib.logging.context import save_to_logging_context


class LoggedRoute(APIRoute):
    """
    Route class emitting one canonical log line per handled request.

    The line is written from a background task, after the response has been sent to the client.
    """

    def get_route_handler(self) -> Callable:
        route_handler = super().get_route_handler()
        route_path = self.path_format
        endpoint_name = self.name

        async def logging_route_handler(request: Request) -> Response:
            save_to_logging_context({"time_ns": time.time_ns(), "route": route_path, "endpoint": endpoint_name})
            response = await route_handler(request)

            canonical_task = BackgroundTask(log_request, request, response, time.time_ns())
            existing = response.background

            if existing is None:
                response.background = canonical_task
            elif isinstance(existing, BackgroundTasks):
                existing.add_task(canonical_task)
            else:
                tasks = BackgroundTasks()
                tasks.add_task(existing)
                tasks.add_task(canonical_task)
                response.background = tasks

            return response

        return logging_route_handler
