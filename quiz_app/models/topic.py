# quiz_app/models/topic.py
from pydantic import BaseModel, ConfigDict
from typing import Dict

class Topic(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    category_id: int  # Open Trivia DB category

# Map user-friendly topic ids to their provider category ids
SUPPORTED_TOPICS: Dict[str, Topic] = {
    topic.id: topic
    for topic in (
        Topic(id="general-knowledge", title="General Knowledge",
              description="Test your knowledge on a wide range of topics.", category_id=9),
        Topic(id="science-nature", title="Science & Nature",
              description="Explore the natural world and scientific principles.", category_id=17),
        Topic(id="english-language", title="English Language",
              description="Challenge your grammar, vocabulary, and literary skills.", category_id=10),
        Topic(id="arts-literature", title="Arts & Literature",
              description="Dive into the world of creative expression and stories.", category_id=25),
    )
}
