"""Journal chat routes: RAG chat, conversations, embedding generation, analysis."""

import sqlite3
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException

from cli.retry import llm_retry
from journal.analysis import ANALYSIS_COLUMNS, analyze_journals
from journal.indexer import EmptyContentError, IndexingError, JournalIndexer
from journal.prompts import PromptTemplates, build_chat_prompt, format_context_chunk
from journal.store import JournalStore
from llm import LLMError, LLMRateLimitError
from web.auth import get_current_user
from web.conversation_store import (
    add_message,
    conversation_belongs_to,
    create_conversation,
    get_messages,
    list_conversations,
)
from web.deps import get_config, get_embedder, get_embeddings, get_llm, get_store
from web.models import ChatRequest, GenerateEmbeddingsRequest
from web.user_store import log_event

logger = structlog.get_logger()

router = APIRouter(prefix="/api/chat", tags=["chat"])

HISTORY_MESSAGES = 6


def _analysis(store: JournalStore, user_id: str) -> dict:
    rows = store.fetch_entries(user_id, ANALYSIS_COLUMNS, ascending=False)
    return analyze_journals(rows, emotion_map=store.emotion_lookup())


def _retrieve_context(store: JournalStore, user_id: str, question: str) -> tuple[str, list[dict]]:
    """Top matching chunks as prompt lines, plus the entries they came from."""
    cfg = get_config().embeddings
    vector = get_embedder().embed(question)
    matches = get_embeddings().query(
        vector, user_id, n_results=cfg.match_count, max_distance=cfg.max_distance
    )
    if not matches:
        return "", []

    entries: dict[str, Optional[dict]] = {}
    for match in matches:
        journal_id = match["journal_id"]
        if journal_id not in entries:
            entries[journal_id] = store.get_entry(journal_id, user_id)

    lines = [
        format_context_chunk(m["content"], entries[m["journal_id"]])
        for m in matches[: cfg.context_chunks]
    ]
    return "\n\n".join(lines), [e for e in entries.values() if e]


@llm_retry(exceptions=(LLMRateLimitError,))
def _generate(prompt: str) -> str:
    return get_llm().generate(
        [{"role": "user", "content": prompt}],
        system=PromptTemplates.SYSTEM,
        max_tokens=get_config().llm.max_tokens,
    )


@router.post("")
def chat(
    body: ChatRequest,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Answer a question with journal statistics and retrieved entry excerpts."""
    conv_id = body.conversation_id
    if conv_id and not conversation_belongs_to(conv_id, user["id"]):
        raise HTTPException(status_code=404, detail="Conversation not found")
    history = get_messages(conv_id, limit=HISTORY_MESSAGES) if conv_id else []

    try:
        analysis = _analysis(store, user["id"])
    except sqlite3.Error as e:
        logger.warning("chat.analysis_failed", error=str(e))
        analysis = None

    try:
        journal_context, context_entries = _retrieve_context(store, user["id"], body.message)
    except Exception as e:
        logger.warning("chat.retrieval_failed", error=str(e))
        journal_context, context_entries = "", []

    if not conv_id:
        conv_id = create_conversation(user["id"], body.message)
    add_message(conv_id, "user", body.message)

    prompt = build_chat_prompt(body.message, analysis, journal_context, history)
    try:
        response = _generate(prompt)
    except LLMError as e:
        logger.error("chat.generate_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    add_message(conv_id, "assistant", response)
    log_event("chat_message", user["id"], {"context_entries": len(context_entries)})
    return {
        "response": response,
        "conversationId": conv_id,
        "contextUsed": bool(context_entries),
    }


@router.get("/conversations")
async def get_conversations(user: dict = Depends(get_current_user)):
    return {"conversations": list_conversations(user["id"])}


@router.get("/{conversation_id}/messages")
async def get_conversation_messages(
    conversation_id: str,
    user: dict = Depends(get_current_user),
):
    if not conversation_belongs_to(conversation_id, user["id"]):
        raise HTTPException(status_code=404, detail="Conversation not found")
    return {"messages": get_messages(conversation_id)}


@router.get("/journal-analysis")
async def journal_analysis(
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Mood summary and environmental correlations for the user's entries."""
    try:
        return _analysis(store, user["id"])
    except sqlite3.Error as e:
        logger.error("chat.journal_analysis_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/generate-embeddings")
def generate_embeddings(
    body: GenerateEmbeddingsRequest,
    user: dict = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
):
    """Chunk, embed and store one journal entry."""
    if not body.journal_id:
        raise HTTPException(status_code=400, detail="Journal ID is required")

    entry = store.get_entry(body.journal_id, user["id"])
    if entry is None:
        raise HTTPException(status_code=404, detail="Journal not found")

    cfg = get_config().embeddings
    try:
        indexer = JournalIndexer(
            get_embeddings(),
            get_embedder().embed,
            delay=cfg.delay_seconds,
            max_chars=cfg.chunk_chars,
            overlap=cfg.chunk_overlap,
        )
        result = indexer.index_entry(
            entry,
            user["id"],
            emotion_name=store.emotion_lookup().get(entry["emotion_id"]),
            force=body.force,
        )
    except EmptyContentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (IndexingError, LLMError) as e:
        logger.error("chat.generate_embeddings_error", journal_id=body.journal_id, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    if result.skipped:
        return {"message": "Embeddings already exist for this journal", "journalId": body.journal_id}

    log_event("embeddings_generated", user["id"], {"chunks": result.chunks_processed})
    return {
        "message": "Embeddings generated successfully",
        "journalId": body.journal_id,
        "chunksProcessed": result.chunks_processed,
        "totalContent": result.total_content,
        "preview": result.preview,
    }
