"""Database model type definitions."""

from src.models.company import CompanyInfo
from src.models.document import Document
from src.models.message import ChatMessage, MessageRole
from src.models.records import (
    BusinessProcess,
    CompanyValue,
    CurrentSoftware,
    GoalAndWish,
    Product,
    Supplier,
    TeamMember,
)
from src.models.session import OnboardingSession

__all__ = [
    "OnboardingSession",
    "CompanyInfo",
    "BusinessProcess",
    "GoalAndWish",
    "CompanyValue",
    "Product",
    "Supplier",
    "TeamMember",
    "CurrentSoftware",
    "Document",
    "ChatMessage",
    "MessageRole",
]
