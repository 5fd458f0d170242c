from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from src.orchestrator.intents import Entity, Intent


@dataclass
class ConversationState:
    session_id: str = ""
    question: str = ""
    corrected_question: str = ""
    resolved_question: str = ""
    intent: Intent = Intent.NONE
    entities: List[Entity] = field(default_factory=list)
    answer: Union[str, List[str]] = ""

    def copy(self) -> "ConversationState":
        return ConversationState(
            session_id=self.session_id,
            question=self.question,
            corrected_question=self.corrected_question,
            resolved_question=self.resolved_question,
            intent=self.intent,
            entities=list(self.entities),
            answer=list(self.answer) if isinstance(self.answer, list) else self.answer,
        )
