# quiz_app/endpoints/topics.py
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import List

from quiz_app.models.enums import Difficulty
from quiz_app.models.topic import Topic
from quiz_app.services.session_engine import SessionEngine
from quiz_app.utils.dependencies import get_engine

router = APIRouter()

class TopicCatalog(BaseModel):
    topics: List[Topic]
    difficulties: List[Difficulty]

@router.get("/", response_model=TopicCatalog)
async def list_topics(engine: SessionEngine = Depends(get_engine)):
    return TopicCatalog(topics=engine.list_topics(), difficulties=engine.list_difficulties())
