"""
Tool Routes

- GET /tools: tool definitions with their JSON input schemas
- POST /tools/{name}: call a tool; the JSON body is the arguments object

A failed call returns the error envelope with the error's status code
(400 validation/protocol, 404 not found, 503 circuit open, 408 timeout).
"""

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from design_system.application.api.dependencies import DispatcherDep
from design_system.application.api.models import ToolInfo, ToolListResponse
from design_system.core.exceptions import error_response, log_error, normalize_error

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.get("", response_model=ToolListResponse, response_model_by_alias=True)
async def list_tools(dispatcher: DispatcherDep):
    tools = [
        ToolInfo(name=t.name, description=t.description, input_schema=t.input_schema)
        for t in dispatcher.list_tools()
    ]
    return ToolListResponse(tools=tools, count=len(tools))


@router.post("/{name}")
async def call_tool(
    name: str,
    dispatcher: DispatcherDep,
    arguments: Any = Body(default=None),
):
    """
    Call tool ``name`` with the request body as its arguments.

    Returns:
        {"success": true, "data": ...} with 200, or
        {"success": false, "error": {...}} with the error's status code
    """
    try:
        data = await dispatcher.invoke(name, arguments)
    except Exception as exc:
        error = normalize_error(exc, tool=name)
        log_error(error, tool=name)
        return JSONResponse(status_code=error.status_code, content=error_response(error))

    return {"success": True, "data": data}
