from contextlib import asynccontextmanager
import logging

import anthropic
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
import llm
from commands import parse_command
from database import init_db, get_task_store
from logging_setup import setup_logging
from models import Task, TaskCreate, ChatRequest
from page import HTML_PAGE
from prompts import SYSTEM_PROMPT, MODEL_UNAVAILABLE_REPLY, NO_TASKS_REPLY

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    setup_logging(config.LOG_LEVEL)
    init_db()
    yield
    # Shutdown (nothing to do)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON, missing fields and wrong types are all a plain 400."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": "Invalid request body"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown path and wrong method on a known path both read as not found
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"detail": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


def task_to_json(task: Task) -> dict:
    return task.model_dump(by_alias=True, exclude_none=True)


def format_task_list(tasks: list[Task]) -> str:
    """Numbered, one task per line, in insertion order."""
    if not tasks:
        return NO_TASKS_REPLY
    return "\n".join(
        f"{n}. {t.title}" + (f" (due {t.due_date})" if t.due_date else "")
        for n, t in enumerate(tasks, start=1)
    )


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


@app.post("/api/stores/{user_id}/add", status_code=201)
def store_add(user_id: str, task_data: TaskCreate) -> dict:
    task = get_task_store(user_id).add(task_data.title, task_data.due_date)
    return task_to_json(task)


@app.get("/api/stores/{user_id}/list")
def store_list(user_id: str) -> list[dict]:
    return [task_to_json(t) for t in get_task_store(user_id).list()]


@app.post("/api/chat")
async def chat(chat_request: ChatRequest):
    """Handle add/list commands locally; send everything else to the model."""
    cmd = parse_command(chat_request.message)
    logger.info("Chat intent=%s", cmd.type)

    if cmd.type == "add":
        get_task_store(chat_request.user_id).add(cmd.title, cmd.due_date)
        due = f" due by {cmd.due_date}" if cmd.due_date else ""
        return {"reply": f'Added task "{cmd.title}"{due}.'}

    if cmd.type == "list":
        tasks = get_task_store(chat_request.user_id).list()
        return {"reply": format_task_list(tasks), "tasks": [task_to_json(t) for t in tasks]}

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": chat_request.message},
    ]
    try:
        result = await llm.run_model(messages)
        reply = llm.extract_reply(result)
    except anthropic.AnthropicError:
        logger.exception("AI model invocation failed")
        return JSONResponse(status_code=503, content={"reply": MODEL_UNAVAILABLE_REPLY})

    return {"reply": reply}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
