"""
Keyword chatbot route.
"""
from fastapi import APIRouter
from pydantic import BaseModel, Field

router = APIRouter(prefix="/chatbot", tags=["chatbot"])

# checked in order, first keyword found wins
RESPONSES = {
    "hello": "Hello! How can I help you today?",
    "hi": "Hi there! How can I assist you?",
    "help": "I can help you with vehicle service related queries. What would you like to know?",
    "service": "We offer various vehicle services including maintenance, repairs, and emergency assistance.",
    "price": "Service prices vary depending on the type of service. Please contact our service center for detailed pricing.",
    "location": "You can find our service center locations on the Contact page.",
    "contact": "You can reach us through the Contact page or by replying to any of our emails.",
}
FALLBACK = "I'm sorry, I don't understand that. Could you please rephrase?"


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    response: str


def reply_to(message: str) -> str:
    lower = message.lower()
    for keyword, response in RESPONSES.items():
        if keyword in lower:
            return response
    return FALLBACK


@router.post("/chat", response_model=ChatResponse)
def chat(payload: ChatRequest):
    """Answer a message with a canned reply."""
    return {"response": reply_to(payload.message)}
