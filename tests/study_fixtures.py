import copy
import json

from langchain_core.messages import AIMessage


PASSAGE_PAYLOAD = {
    "meta": {"reference": "João 1:1", "translation": "KJV", "generated_at": "1999-01-01"},
    "summary": {
        "executive": "João anuncia o batismo com o Espírito Santo e com fogo.",
        "key_quote": "Ele vos batizará com o Espírito Santo e com fogo.",
        "preaching_points": ["O arrependimento prepara o caminho", "Cristo é maior que João"],
    },
    "content": {
        "text_base": "Eu vos batizo com água, para arrependimento...",
        "intro_definition": "O batismo de João como sinal escatológico.",
        "context_literary": "Narrativa do ministério de João Batista (Mt 3).",
        "context_historical": "Judeia sob domínio romano, expectativa messiânica.",
        "parallels": [
            {"reference": "Lucas 3:16", "text": "Texto sinótico.", "correlation": "Sinótico"},
        ],
        "lexical_analysis": [
            {
                "word": "batizar",
                "lemma": "βαπτίζω",
                "transliteration": "baptizō",
                "morphology": "Verbo Presente Indicativo Ativo, 1ª Sing",
                "meaning": "Imergir; lavar ritualmente.",
            },
            {"word": "fogo", "lemma": "πῦρ", "meaning": "Fogo; juízo ou purificação."},
        ],
        "intertextuality": "Ecos de Malaquias 3:2-3.",
        "interpretations": [
            {"tradition": "Reformada", "summary": "O fogo como purificação do povo de Deus."},
        ],
        "theologians": [
            {"name": "João Crisóstomo", "era": "Patrística (Séc IV)", "view": "Fogo como graça abundante."},
            {"name": "João Calvino", "era": "Reforma (Séc XVI)", "view": "Fogo como obra santificadora."},
        ],
        "implications": "Chamado ao arrependimento genuíno.",
        "study_questions": ["O que significa ser batizado com fogo?"],
        "bibliography": [
            {
                "author": "D. A. Carson",
                "title": "Matthew",
                "publisher": "Zondervan",
                "year": "1984",
                "annotation": "Comentário exegético de referência.",
            },
            {"author": "R. T. France", "title": "The Gospel of Matthew", "annotation": "Análise narrativa."},
        ],
    },
    "sermon": {
        "title": "O Batismo que Transforma",
        "text_focus": "Mateus 3:11",
        "introduction": "Todos buscam renovação.",
        "points": [
            {
                "title": "O batismo de arrependimento",
                "explanation": "João chama à conversão (Mt 3:2).",
                "illustration": "Uma casa preparada para o rei.",
                "application": "Devemos confessar nossos pecados (1 Jo 1:9).",
            },
        ],
        "conclusion": "Cristo batiza com o Espírito.",
    },
    "slides": [
        {"title": "Mateus 3:11", "bullets": ["Arrependimento", "Espírito e fogo"], "image_hint": "Rio Jordão"},
        {"title": "Aplicação", "bullets": ["Confissão"]},
    ],
}


def _section(*names):
    return {name: f"{name} text" for name in names}


BOOK_PAYLOAD = {
    "meta": {"reference": "Gálatas", "translation": "ARC"},
    "bookIntro": {
        "general_id": {"name": "Romanos", "original_name": "Πρὸς Ῥωμαίους", "canon_position": "Sexto livro do NT"},
        "authorship": _section("author_traditional", "internal_evidence", "external_evidence", "academic_debate"),
        "dating": _section("approximate_date", "historical_context", "contemporary_events", "arguments"),
        "recipients": _section("target_audience", "location", "social_conditions", "spiritual_situation"),
        "context_cultural": _section("political_panorama", "culture_customs", "economic_social", "neighbors_relation"),
        "context_canonical": _section(
            "relation_prev_next", "continuity_rupture", "promise_fulfillment", "narrative_preparation"
        ),
        "purpose": _section("main_objective", "problems_addressed", "intent"),
        "themes": ["Justificação pela fé", "Justiça de Deus"],
        "central_message": "O evangelho é o poder de Deus para a salvação.",
        "structure": {"sections": ["1-8 Doutrina", "9-11 Israel", "12-16 Prática"], "progression": "Lógica", "genre": "Epístola"},
        "style": {"literary_features": "Diatribe", "keywords": ["justiça", "fé"], "techniques": "Perguntas retóricas"},
        "characters": [{"name": "Paulo", "role": "Autor"}, {"name": "Febe", "role": "Portadora da carta"}],
        "theology": {"doctrines": ["Justificação", "Eleição"], "contributions": "Soteriologia", "controversies": "Nova Perspectiva"},
        "key_passages": [{"reference": "Rm 1:16-17", "description": "Tese da carta"}],
        "redemptive_plan": _section("christ_pointer", "salvation_relation"),
        "application": {"principles": ["Viver pela fé"], "church_relevance": "Unidade", "pastoral_implications": "Segurança"},
        "interpretation_challenges": {"difficult_texts": ["Rm 7:14-25"], "hermeneutic_problems": "Identidade do eu"},
        "conclusion": "Carta central da fé cristã.",
    },
}


def passage_payload():
    return copy.deepcopy(PASSAGE_PAYLOAD)


def book_payload():
    return copy.deepcopy(BOOK_PAYLOAD)


class ProviderError(Exception):
    """Stand-in for a provider exception exposing an HTTP-like `code`."""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


class FakeLLM:
    """Chat model double: each ainvoke consumes the next outcome (text or exception)."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, dict):
            outcome = json.dumps(outcome, ensure_ascii=False)
        return AIMessage(content=outcome)


class FakeLLMFactory:
    """Replaces get_llm_client; records (config, schema, temperature) per call."""

    def __init__(self, outcomes):
        self.llm = FakeLLM(outcomes)
        self.calls = []

    def __call__(self, config, schema, temperature):
        self.calls.append({"config": config, "schema": schema, "temperature": temperature})
        return self.llm

    @property
    def attempts(self):
        return len(self.llm.calls)


class SleepRecorder:
    """Async sleep double that records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)
