from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from typing import Callable

from langgraph.graph import END, StateGraph

from src.orchestrator.intents import Classification, Entity, EntityKind, Intent
from src.orchestrator.state import ConversationState
from src.services.dispatcher import FALLBACK_ANSWER, IntentDispatcher
from src.services.pronouns import PronounResolver
from src.services.session_memory import SessionMemoryStore

logger = logging.getLogger(__name__)


class AgentOrchestrator:
    """LangGraph pipeline answering one question for one session.

    spell_corrector -> pronoun_resolver -> intent_classifier -> memory_writer,
    then either the dispatcher or the fallback node.
    """

    def __init__(
        self,
        session_store: SessionMemoryStore,
        dispatcher: IntentDispatcher,
        intent_classifier: Callable[[str], Classification],
        spelling_corrector: Callable[[str], str],
        pronoun_resolver: PronounResolver | None = None,
    ) -> None:
        self._session_store = session_store
        self._dispatcher = dispatcher
        self._intent_classifier = intent_classifier
        self._spelling_corrector = spelling_corrector
        self._pronoun_resolver = pronoun_resolver or PronounResolver()
        self._graph = self._build_graph().compile()

    def _build_graph(self) -> StateGraph[ConversationState]:
        graph: StateGraph[ConversationState] = StateGraph(ConversationState)

        graph.add_node("spell_corrector", self._spelling_node)
        graph.add_node("pronoun_resolver", self._pronoun_node)
        graph.add_node("intent_classifier", self._intent_node)
        graph.add_node("memory_writer", self._memory_node)
        graph.add_node("dispatcher", self._dispatch_node)
        graph.add_node("fallback", self._fallback_node)

        graph.set_entry_point("spell_corrector")
        graph.add_edge("spell_corrector", "pronoun_resolver")
        graph.add_edge("pronoun_resolver", "intent_classifier")
        graph.add_edge("intent_classifier", "memory_writer")
        graph.add_conditional_edges(
            "memory_writer",
            self._intent_router,
            {
                True: "dispatcher",
                False: "fallback",
            },
        )
        graph.add_edge("dispatcher", END)
        graph.add_edge("fallback", END)

        return graph

    def _spelling_node(self, state: ConversationState) -> ConversationState:
        updated = state.copy()
        updated.corrected_question = self._spelling_corrector(updated.question)
        return updated

    def _pronoun_node(self, state: ConversationState) -> ConversationState:
        updated = state.copy()
        context = self._session_store.get_or_create(updated.session_id)
        updated.resolved_question = self._pronoun_resolver.resolve(updated.corrected_question, context)
        return updated

    def _intent_node(self, state: ConversationState) -> ConversationState:
        updated = state.copy()
        classification = self._intent_classifier(updated.resolved_question)
        updated.intent = classification.intent
        updated.entities = list(classification.entities)
        logger.debug(
            "Session %s: %r -> %s",
            updated.session_id,
            updated.resolved_question,
            updated.intent.value,
        )
        return updated

    def _memory_node(self, state: ConversationState) -> ConversationState:
        self._session_store.apply_entities(state.session_id, state.entities)
        return state.copy()

    def _dispatch_node(self, state: ConversationState) -> ConversationState:
        updated = state.copy()
        context = self._session_store.get_or_create(updated.session_id)
        updated.answer = self._dispatcher.dispatch(updated.intent, updated.entities, context)
        return updated

    def _fallback_node(self, state: ConversationState) -> ConversationState:
        updated = state.copy()
        updated.answer = FALLBACK_ANSWER
        return updated

    def _intent_router(self, state: ConversationState) -> bool:
        return state.intent != Intent.NONE

    def run(self, state: ConversationState) -> ConversationState:
        payload = asdict(state) if is_dataclass(state) else state
        with self._session_store.lock(state.session_id):
            result = self._graph.invoke(payload)
        if isinstance(result, ConversationState):
            return result
        if isinstance(result, dict):
            intent_value = result.get("intent", Intent.NONE)
            if not isinstance(intent_value, Intent):
                intent_value = Intent(intent_value)
            return ConversationState(
                session_id=result.get("session_id", ""),
                question=result.get("question", ""),
                corrected_question=result.get("corrected_question", ""),
                resolved_question=result.get("resolved_question", ""),
                intent=intent_value,
                entities=[self._coerce_entity(entity) for entity in result.get("entities", [])],
                answer=result.get("answer", ""),
            )
        raise TypeError(f"Unsupported state result from graph: {type(result)!r}")

    @staticmethod
    def _coerce_entity(entity) -> Entity:
        if isinstance(entity, Entity):
            return entity
        return Entity(kind=EntityKind(entity["kind"]), source_text=entity["source_text"])
