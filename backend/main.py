from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
import logging
import sqlite3
import uuid

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from database import (
    init_db,
    get_all_tasks,
    get_task_db,
    get_task_summary,
    create_task_db,
    update_task_db,
    toggle_task_db,
    delete_task_db,
)
from extractor import extract
from logging_setup import setup_logging
from models import (
    Category,
    CategorySummary,
    ExtractionResult,
    SmsMessage,
    SmsResult,
    Task,
    TaskCreate,
    TaskUpdate,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)
    init_db()
    yield
    # Shutdown (nothing to do)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_now() -> datetime:
    """Clock provider; overridden in tests to pin "today"."""
    return datetime.now()


@app.exception_handler(sqlite3.Error)
async def task_store_error(_request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error("Task store error: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Task store unavailable"})


@app.get("/tasks")
def get_tasks(category: Optional[Category] = None, completed: Optional[bool] = None) -> list[Task]:
    return get_all_tasks(category, completed)


@app.get("/tasks/summary")
def get_summary() -> dict[str, CategorySummary]:
    """Counts behind the Work (n) / Life (n) tabs."""
    return get_task_summary()


@app.get("/tasks/{task_id}")
def get_task(task_id: str) -> Task:
    task = get_task_db(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@app.post("/tasks")
def create_task(task_data: TaskCreate) -> Task:
    task = create_task_db(
        str(uuid.uuid4()),
        task_data.title,
        task_data.category,
        task_data.priority,
        task_data.due_date
    )
    logger.info('Task "%s" added to %s list', task.title, task.category)
    return task


@app.patch("/tasks/{task_id}")
def update_task(task_id: str, task_data: TaskUpdate) -> Task:
    # Only fields present in the request are changed; due_date may be cleared with null
    result = update_task_db(task_id, **task_data.model_dump(exclude_unset=True))
    if not result:
        raise HTTPException(status_code=404, detail="Task not found")
    return result


@app.post("/tasks/{task_id}/toggle")
def toggle_task(task_id: str) -> Task:
    result = toggle_task_db(task_id)
    if not result:
        raise HTTPException(status_code=404, detail="Task not found")
    return result


@app.delete("/tasks/{task_id}")
def delete_task(task_id: str) -> dict:
    if not delete_task_db(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info("Task %s deleted", task_id)
    return {"status": "deleted"}


@app.get("/sms/number")
def get_sms_number() -> dict:
    """Number the user texts tasks to. Delivery is simulated via POST /sms."""
    return {"phone_number": config.SMS_NUMBER}


@app.post("/sms/preview")
def preview_sms(sms: SmsMessage, now: datetime = Depends(get_now)) -> ExtractionResult:
    """Show what a message would turn into without creating anything."""
    return extract(sms.text, now)


@app.post("/sms")
def receive_sms(sms: SmsMessage, now: datetime = Depends(get_now)) -> SmsResult:
    """Simulate an incoming SMS: extract a task from the text and create it."""
    extraction = extract(sms.text, now)

    if extraction.is_empty:
        logger.info("SMS ignored, no title left after keywords: %r", extraction.raw_text)
        return SmsResult(
            created=False,
            message="No task created: the message only contained keywords",
            extraction=extraction,
        )

    task = create_task_db(
        str(uuid.uuid4()),
        extraction.title,
        extraction.category,
        extraction.priority,
        extraction.due_date
    )
    logger.info('Task "%s" received via SMS for %s list', task.title, task.category)
    return SmsResult(
        created=True,
        message=f'Task received via SMS! "{task.title}" has been added to your {task.category} list.',
        extraction=extraction,
        task=task,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
