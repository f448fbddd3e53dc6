from fastapi import Request

from polite_proxy.services import SubmitMessagePipeline


async def get_pipeline(request: Request) -> SubmitMessagePipeline:
    """Pipeline built by create_app(); one instance per process, no per-request state."""
    return request.app.state.pipeline
