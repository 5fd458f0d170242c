from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from src.adapters.roster_client import RosterClient
from src.app.config import get_settings
from src.ingestion.roster import RosterRefresher
from src.orchestrator.graph import AgentOrchestrator
from src.services.dispatcher import IntentDispatcher
from src.services.intent_rules import RuleBasedIntentOracle
from src.services.knowledge_base import KnowledgeBase, default_knowledge_base
from src.services.practitioners import PractitionerCache
from src.services.pronouns import PronounResolver
from src.services.session_memory import SessionMemoryStore
from src.services.spelling import SpellingCorrector


@lru_cache(maxsize=1)
def get_session_store() -> SessionMemoryStore:
    return SessionMemoryStore()


@lru_cache(maxsize=1)
def get_knowledge_base() -> KnowledgeBase:
    return default_knowledge_base()


@lru_cache(maxsize=1)
def get_practitioner_cache() -> PractitionerCache:
    return PractitionerCache()


@lru_cache(maxsize=1)
def get_roster_client() -> RosterClient:
    settings = get_settings()
    return RosterClient(url=settings.roster_url, timeout=settings.roster_timeout)


@lru_cache(maxsize=1)
def get_roster_refresher() -> RosterRefresher:
    settings = get_settings()
    return RosterRefresher(
        source=get_roster_client(),
        cache=get_practitioner_cache(),
        interval_seconds=settings.roster_refresh_seconds,
    )


@lru_cache(maxsize=1)
def get_intent_oracle() -> RuleBasedIntentOracle:
    settings = get_settings()
    cache = get_practitioner_cache()
    oracle = RuleBasedIntentOracle(
        knowledge_base=get_knowledge_base(),
        similarity_threshold=settings.intent_similarity_threshold,
    )
    oracle.update_roster(cache.snapshot())
    cache.add_listener(oracle.update_roster)
    return oracle


@lru_cache(maxsize=1)
def get_spelling_corrector() -> SpellingCorrector:
    return SpellingCorrector()


@lru_cache(maxsize=1)
def get_pronoun_resolver() -> PronounResolver:
    return PronounResolver()


def get_dispatcher(
    cache: PractitionerCache = Depends(get_practitioner_cache),
    knowledge_base: KnowledgeBase = Depends(get_knowledge_base),
) -> IntentDispatcher:
    return IntentDispatcher(cache=cache, knowledge_base=knowledge_base)


def get_orchestrator(
    session_store: SessionMemoryStore = Depends(get_session_store),
    dispatcher: IntentDispatcher = Depends(get_dispatcher),
    oracle: RuleBasedIntentOracle = Depends(get_intent_oracle),
    corrector: SpellingCorrector = Depends(get_spelling_corrector),
    resolver: PronounResolver = Depends(get_pronoun_resolver),
) -> AgentOrchestrator:
    return AgentOrchestrator(
        session_store=session_store,
        dispatcher=dispatcher,
        intent_classifier=oracle.classify,
        spelling_corrector=corrector.correct_text,
        pronoun_resolver=resolver,
    )
