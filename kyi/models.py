from pydantic import BaseModel
from typing import Optional


class User(BaseModel):
    id: str
    email: str
    name: str
    current_level: str = "N3"


class UserProfile(BaseModel):
    name: str
    current_level: str


class VocabularyItem(BaseModel):
    id: str
    japanese: str
    hiragana: str
    burmese: str
    english: str
    level: str
    category: str
    example_sentence: Optional[str] = None
    example_burmese: Optional[str] = None
    created_at: Optional[str] = None


class Example(BaseModel):
    japanese: str
    burmese: str
    english: str


class GrammarPoint(BaseModel):
    id: str
    pattern: str
    meaning: str
    burmese_explanation: str
    english_explanation: str
    level: str
    examples: list[Example] = []
    created_at: Optional[str] = None


class DialogueLine(BaseModel):
    speaker: str
    japanese: str
    burmese: str
    english: str


class KeyPhrase(BaseModel):
    japanese: str
    burmese: str
    english: str


class KaiwaScenario(BaseModel):
    id: str
    title: str
    title_burmese: str
    level: str
    situation: str
    dialogue: list[DialogueLine] = []
    key_phrases: list[KeyPhrase] = []
    created_at: Optional[str] = None


class ProgressRecord(BaseModel):
    id: str
    user_id: str
    item_type: str  # 'vocabulary', 'grammar', 'kaiwa'
    item_id: str
    mastery_level: int
    review_count: int
    last_reviewed: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProgressStats(BaseModel):
    vocabulary: int = 0
    grammar: int = 0
    kaiwa: int = 0
    totalReviews: int = 0


class ChatMessage(BaseModel):
    id: str
    user_id: str
    message: str
    role: str  # 'user' or 'assistant'
    language: str
    created_at: str


class SignUpRequest(BaseModel):
    email: str
    password: str
    name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class ChatRequest(BaseModel):
    message: str
    language: str = "burmese"
