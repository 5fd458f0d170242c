from __future__ import annotations

import logging
import math
import re
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from src.orchestrator.intents import Classification, Entity, EntityKind, Intent
from src.schemas.practitioner import PractitionerRecord
from src.services.knowledge_base import KnowledgeBase

logger = logging.getLogger(__name__)

TokenVector = Dict[str, float]
GazetteerEntry = Tuple[EntityKind, str, re.Pattern]

_TOKEN_PATTERN = re.compile(r"%[a-z]+%|[a-z0-9']+")


DEFAULT_TRAINING_DATA: Mapping[Intent, List[str]] = {
    Intent.DOCTOR_AVAILABILITY: [
        "when is %doctor% available",
        "availability of %doctor%",
        "what day can i visit %doctor%",
    ],
    Intent.DOCTOR_BY_DAY: [
        "doctor working on %day%",
        "which doctors are available on %day%",
    ],
    Intent.DOCTOR_BY_SPECIALTY: [
        "show doctors for %specialty%",
        "who is the %specialty%",
        "i want to see a %specialty%",
    ],
    Intent.LIST_BRANCHES: [
        "which branches do you have",
        "what branches do you have",
    ],
    Intent.SERVICES_RWANDA: [
        "services in rwanda",
        "departments in rwanda",
    ],
    Intent.SERVICES_BULBULA: [
        "departments in bulbula branch",
        "services in bulbula",
    ],
    Intent.LIST_DOCTORS: [
        "list doctors",
        "list all doctors",
    ],
    Intent.EMERGENCY_CONTACT: [
        "emergency number",
        "how do i contact in emergency",
    ],
    Intent.BRANCH_LOCATION: [
        "where is %branch%",
        "location of %branch%",
        "how can i find %branch%",
        "address of %branch%",
        "branch %branch% location",
    ],
}


def _phrase_pattern(phrase: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", re.IGNORECASE)


class RuleBasedIntentOracle:
    """Gazetteer entity extraction plus nearest-example tf-idf intent scoring.

    Entity spans are replaced by ``%kind%`` placeholders before scoring, so the
    training phrases can stay generic ("availability of %doctor%"). Each intent
    scores as its closest training phrase, compared against both the raw and the
    templated utterance.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        training_data: Mapping[Intent, Iterable[str]] | None = None,
        similarity_threshold: float = 0.5,
    ) -> None:
        self._knowledge_base = knowledge_base
        self._training_data = self._normalize_training_data(training_data)
        self._idf = self._build_idf(self._training_data)
        self._examples = self._build_examples(self._training_data)
        self._threshold = similarity_threshold
        self._static_entries = self._static_gazetteer(knowledge_base)
        self._gazetteer: Tuple[GazetteerEntry, ...] = tuple(self._static_entries)

    def update_roster(self, records: Sequence[PractitionerRecord]) -> None:
        """Make doctor and specialty names of ``records`` recognizable."""
        entries = list(self._static_entries)
        doctor_names = dict.fromkeys(record.stripped_name for record in records if record.stripped_name)
        for name in doctor_names:
            entries.append((EntityKind.DOCTOR, name, _phrase_pattern(name)))

        specialties: Dict[str, None] = {}
        for record in records:
            for value in (record.specialty, record.department):
                if value and value.strip():
                    specialties[value.strip().lower()] = None
        for specialty in specialties:
            entries.append((EntityKind.SPECIALTY, specialty, _phrase_pattern(specialty)))

        self._gazetteer = tuple(entries)
        logger.info(
            "Gazetteer rebuilt with %d doctors and %d specialties",
            len(doctor_names),
            len(specialties),
        )

    def classify(self, text: str) -> Classification:
        entities, templated = self.extract_entities(text)
        intent = self._score(text, templated)
        logger.debug("Classified %r as %s with %d entities", text, intent.value, len(entities))
        return Classification(intent=intent, entities=entities)

    def extract_entities(self, text: str) -> Tuple[List[Entity], str]:
        spans: List[Tuple[int, int, EntityKind]] = []
        for kind, _phrase, pattern in self._gazetteer:
            for match in pattern.finditer(text):
                spans.append((match.start(), match.end(), kind))

        # Longest span wins; ties go to the earlier gazetteer entry.
        spans.sort(key=lambda span: -(span[1] - span[0]))
        accepted: List[Tuple[int, int, EntityKind]] = []
        for start, end, kind in spans:
            if any(start < taken_end and taken_start < end for taken_start, taken_end, _ in accepted):
                continue
            accepted.append((start, end, kind))
        accepted.sort(key=lambda span: span[0])

        entities = [Entity(kind=kind, source_text=text[start:end]) for start, end, kind in accepted]
        pieces = []
        cursor = 0
        for start, end, kind in accepted:
            pieces.append(text[cursor:start])
            pieces.append(f"%{kind.value}%")
            cursor = end
        pieces.append(text[cursor:])
        return entities, "".join(pieces)

    def _score(self, text: str, templated: str) -> Intent:
        vectors = [vector for vector in (self._vectorize(text), self._vectorize(templated)) if vector]
        if not vectors:
            return Intent.NONE

        best_intent = Intent.NONE
        best_score = 0.0
        for intent, examples in self._examples.items():
            for example in examples:
                for vector in vectors:
                    score = self._cosine_similarity(vector, example)
                    if score > best_score:
                        best_intent = intent
                        best_score = score

        if best_score < self._threshold:
            return Intent.NONE
        return best_intent

    def _static_gazetteer(self, knowledge_base: KnowledgeBase) -> List[GazetteerEntry]:
        entries: List[GazetteerEntry] = []
        for day in knowledge_base.weekdays:
            entries.append((EntityKind.DAY, day, _phrase_pattern(day)))
        for branch in knowledge_base.catalog.locations:
            entries.append((EntityKind.BRANCH, branch, _phrase_pattern(branch)))
        return entries

    def _normalize_training_data(
        self, training_data: Mapping[Intent, Iterable[str]] | None
    ) -> Dict[Intent, List[str]]:
        if training_data is None:
            return {intent: list(samples) for intent, samples in DEFAULT_TRAINING_DATA.items()}
        normalised: Dict[Intent, List[str]] = {}
        for intent in Intent:
            examples = list(training_data.get(intent, []))
            if examples:
                normalised[intent] = examples
        if not normalised:
            raise ValueError("Training data must provide at least one example")
        return normalised

    def _build_idf(self, training_data: Mapping[Intent, Iterable[str]]) -> Dict[str, float]:
        doc_counts: Counter[str] = Counter()
        total_docs = 0

        for phrases in training_data.values():
            for phrase in phrases:
                tokens = set(self._tokenize(phrase))
                if not tokens:
                    continue
                doc_counts.update(tokens)
                total_docs += 1

        if total_docs == 0:
            return {}

        idf: Dict[str, float] = {}
        for token, count in doc_counts.items():
            idf[token] = math.log((1 + total_docs) / (1 + count)) + 1.0
        return idf

    def _build_examples(
        self, training_data: Mapping[Intent, Iterable[str]]
    ) -> Dict[Intent, List[TokenVector]]:
        examples: Dict[Intent, List[TokenVector]] = {}
        for intent, phrases in training_data.items():
            vectors = [self._vectorize(phrase) for phrase in phrases]
            examples[intent] = [vector for vector in vectors if vector]
        return examples

    def _vectorize(self, text: str) -> TokenVector:
        tokens = self._tokenize(text)
        if not tokens:
            return {}

        tf = Counter(tokens)
        vector: TokenVector = {}
        length = float(len(tokens))
        for token, term_count in tf.items():
            idf = self._idf.get(token)
            if idf is None:
                continue
            vector[token] = (term_count / length) * idf
        return vector

    def _tokenize(self, text: str) -> List[str]:
        return _TOKEN_PATTERN.findall(text.lower())

    @staticmethod
    def _cosine_similarity(a: TokenVector, b: TokenVector) -> float:
        dot = sum(a_val * b.get(term, 0.0) for term, a_val in a.items())
        if dot == 0.0:
            return 0.0
        norm_a = math.sqrt(sum(value * value for value in a.values()))
        norm_b = math.sqrt(sum(value * value for value in b.values()))
        if norm_a == 0.0 or norm_b == 0.0:
            return 0.0
        return dot / (norm_a * norm_b)
