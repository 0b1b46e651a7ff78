"""
Process API Endpoint.

The primary interface of the server: accepts an instruction plus an optional
uploaded file as multipart form data, plans the instruction, executes the
plan and returns the pipeline result.

Status codes:
- 200: every planned step succeeded.
- 400: the request was invalid, or a pipeline step failed (the body still
  carries the partial step log).
- 500: planning or configuration failure (see the exception handlers).
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from toolflow_ai.agent_core.abstraction import LLMClient, LLMClientFactory
from toolflow_ai.agent_core.schemas.domain import FileRef
from toolflow_ai.agent_core.service import new_request_id
from toolflow_ai.core.errors import InvalidRequestError
from toolflow_ai.core.logging_config import get_logger
from toolflow_ai.server.core.config import settings
from toolflow_ai.server.schemas import ProcessResponse
from toolflow_ai.server.services.deps import LLMFactoryDep, ServiceDep

logger = get_logger(__name__)
router = APIRouter()

UPLOAD_CHUNK_SIZE = 64 * 1024


async def _read_upload(file: Optional[UploadFile], limit: Optional[int] = None) -> Optional[FileRef]:
    """Read an upload in chunks, rejecting it as soon as it exceeds ``limit`` bytes."""
    if file is None or not file.filename:
        return None
    limit = settings.max_file_size if limit is None else limit
    chunks: List[bytes] = []
    size = 0
    while True:
        chunk = await file.read(min(UPLOAD_CHUNK_SIZE, limit + 1 - size))
        if not chunk:
            break
        size += len(chunk)
        if size > limit:
            raise InvalidRequestError(
                f"File too large: more than {limit} bytes",
                code="FILE_TOO_LARGE",
            )
        chunks.append(chunk)
    return FileRef(
        content=b"".join(chunks),
        mimetype=file.content_type or "application/octet-stream",
        filename=file.filename,
    )


def _create_client(factory: LLMClientFactory, alias: Optional[str]) -> LLMClient:
    if not alias:
        return factory.create_default()
    available = factory.available_models()
    if alias not in available:
        raise InvalidRequestError(f"Unknown llm_config '{alias}'. Available: {', '.join(available)}")
    return factory.create(alias)


@router.post(
    "",
    response_model=ProcessResponse,
    responses={400: {"model": ProcessResponse}},
    summary="Process Instruction",
    description="Plan an instruction into a tool pipeline and execute it.",
)
async def process(
    request: Request,
    service: ServiceDep,
    llm_factory: LLMFactoryDep,
    instruction: Annotated[str, Form(min_length=1)],
    llm_config: Annotated[Optional[str], Form()] = None,
    file: Annotated[Optional[UploadFile], File()] = None,
):
    """
    Process an instruction end to end.

    Args:
        instruction: The natural-language instruction.
        llm_config: Optional model alias; the configured default is used otherwise.
        file: Optional uploaded file handed to every pipeline step.
    """
    request_id = new_request_id()
    request.state.request_id = request_id

    if not instruction.strip():
        raise InvalidRequestError("instruction must not be blank")

    upload = await _read_upload(file)
    llm_client = _create_client(llm_factory, llm_config)
    logger.info(f"[{request_id}] POST /v1/process (model: {llm_client.provider}/{llm_client.model})")

    outcome = await service.process(instruction, llm_client, file=upload, request_id=request_id)
    body = ProcessResponse(
        success=outcome.result.success,
        request_id=outcome.request_id,
        plan=outcome.plan,
        result=outcome.result,
        error=outcome.result.error,
    )
    return JSONResponse(
        status_code=200 if outcome.result.success else 400,
        content=body.model_dump(mode="json", by_alias=True),
    )
