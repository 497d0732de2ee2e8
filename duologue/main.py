"""
FastAPI application for running two-agent chats over HTTP.

Endpoints:
- POST /chat - Run a chat to completion
- POST /chat/stream - SSE stream of messages as agents send them
- GET /health - Health check
"""
import json
import threading
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Iterator, Literal

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from langchain_core.language_models import BaseChatModel
from pydantic import BaseModel, Field
from sse_starlette.sse import EventSourceResponse

from duologue.agents import AgentSpec, ConversableAgent, build_agent
from duologue.config import get_settings
from duologue.errors import ChatConfigError
from duologue.logging import log_warning


# Request/Response models
class ChatRequest(BaseModel):
    """Chat request body."""
    message: str = Field(..., min_length=1, max_length=4000)
    initiator: AgentSpec
    recipient: AgentSpec
    max_turns: int = Field(default=4, ge=1, le=50)
    summary_method: Literal["last_msg", "reflection_with_llm"] = "last_msg"
    summary_prompt: str | None = None
    session_id: str | None = None


class ChatResponse(BaseModel):
    """Chat response body."""
    session_id: str
    summary: str
    chat_history: list[dict]
    cost: dict


@dataclass
class ChatSession:
    """Agent pair kept between requests so a chat can be continued."""
    initiator: ConversableAgent
    recipient: ConversableAgent
    lock: threading.Lock = field(default_factory=threading.Lock)


# In-memory session storage (replace with Redis/DB for production)
sessions: dict[str, ChatSession] = {}


def get_chat_model() -> BaseChatModel | None:
    """Chat model shared by server agents. None builds one per agent from settings."""
    return None


def get_or_create_session(request: ChatRequest, client: BaseChatModel | None) -> tuple[str, ChatSession, bool]:
    """
    Get existing session or create new one.

    Returns:
        (session_id, session, is_new)
    """
    if request.session_id and request.session_id in sessions:
        return request.session_id, sessions[request.session_id], False

    # Server agents never wait for a human
    initiator_spec = request.initiator.model_copy(update={"human_input_mode": "NEVER"})
    recipient_spec = request.recipient.model_copy(update={"human_input_mode": "NEVER"})
    if initiator_spec.name == recipient_spec.name:
        raise ChatConfigError("initiator and recipient need different names")

    session = ChatSession(
        initiator=build_agent(initiator_spec, client=client),
        recipient=build_agent(recipient_spec, client=client),
    )
    session_id = request.session_id or str(uuid.uuid4())
    sessions[session_id] = session
    return session_id, session, True


def _summary_args(request: ChatRequest) -> dict:
    return {"summary_prompt": request.summary_prompt} if request.summary_prompt else {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings = get_settings()
    missing = settings.validate()
    if missing:
        log_warning(f"Missing environment variables: {missing}. Agents cannot call the LLM without them.")
    else:
        print("Configuration validated successfully")

    yield

    # Shutdown
    sessions.clear()


# Create FastAPI app
app = FastAPI(
    title="duologue",
    description="Two-agent conversations over LangChain chat models",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    settings = get_settings()
    missing = settings.validate()

    return {
        "status": "healthy" if not missing else "degraded",
        "missing_config": missing,
        "active_sessions": len(sessions),
    }


@app.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, client: BaseChatModel | None = Depends(get_chat_model)):
    """
    Run a chat to completion.

    A known session_id continues the previous chat instead of starting over.
    """
    try:
        session_id, session, is_new = get_or_create_session(request, client)
        with session.lock:
            result = session.initiator.initiate_chat(
                session.recipient,
                message=request.message,
                max_turns=request.max_turns,
                clear_history=is_new,
                silent=True,
                summary_method=request.summary_method,
                summary_args=_summary_args(request),
            )
    except ChatConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ChatResponse(
        session_id=session_id,
        summary=result.summary,
        chat_history=result.chat_history,
        cost=result.cost,
    )


def generate_sse_events(request: ChatRequest, session_id: str, session: ChatSession, is_new: bool) -> Iterator[dict]:
    """Generate SSE events for a streaming chat."""
    with session.lock:
        try:
            for author, message in session.initiator.stream_chat(
                session.recipient,
                message=request.message,
                max_turns=request.max_turns,
                clear_history=is_new,
                silent=True,
            ):
                yield {
                    "event": "message",
                    "data": json.dumps({"author": author, "message": message}, default=str)
                }

            result = session.initiator.build_chat_result(
                session.recipient,
                summary_method=request.summary_method,
                summary_args=_summary_args(request),
            )
            yield {
                "event": "done",
                "data": json.dumps({
                    "session_id": session_id,
                    "summary": result.summary,
                    "cost": result.cost,
                })
            }

        except Exception as e:
            yield {
                "event": "error",
                "data": json.dumps({"error": str(e)})
            }


@app.post("/chat/stream")
def chat_stream(request: ChatRequest, client: BaseChatModel | None = Depends(get_chat_model)):
    """
    SSE streaming chat endpoint.

    Events:
    - message: {"author": "...", "message": {...}}
    - done: {"session_id": "...", "summary": "...", "cost": {...}}
    - error: {"error": "..."}
    """
    try:
        session_id, session, is_new = get_or_create_session(request, client)
    except ChatConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return EventSourceResponse(generate_sse_events(request, session_id, session, is_new))


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "duologue.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True,
    )
