"""
Prompt Builder

Pure mapping from a StudyRequest to (system instruction, user instruction, schema).
No timestamps or other run-dependent text is embedded here.
"""

from dataclasses import dataclass
from typing import Union

from exegesis.study.request import Depth, Mode, StudyRequest
from exegesis.utils.logger import get_logger
from exegesis.utils.response_schemas import BOOK_SCHEMA, PASSAGE_SCHEMA, SchemaNode

logger = get_logger(__name__)


@dataclass(frozen=True)
class DepthFragments:
    """Instruction fragments selected by study depth."""

    label: str
    tone: str
    focus: str
    lexical: str
    theology: str
    sermon: str


DEPTH_FRAGMENTS = {
    Depth.QUICK: DepthFragments(
        label="RÁPIDO",
        tone="Tom devocional, inspirador, prático e conciso. Linguagem simples e direta.",
        focus="Priorize a brevidade. O objetivo é leitura rápida e edificação.",
        lexical="Selecione 3 palavras-chave essenciais. Inclua morfologia básica.",
        theology="Apresente 3 visões principais (Consenso Histórico, Evangélico, Aplicação Prática).",
        sermon="Gere um esboço devocional curto de 3 pontos.",
    ),
    Depth.DETAILED: DepthFragments(
        label="DETALHADO",
        tone="Tom educacional, didático e equilibrado. Linguagem acessível mas robusta.",
        focus="Equilíbrio entre profundidade e clareza. Ideal para professores de Escola Bíblica.",
        lexical="Selecione 5 palavras importantes com morfologia detalhada.",
        theology=(
            "Apresente 5 a 6 linhas interpretativas variadas e relevantes para o texto. "
            "Não se limite às clássicas; considere tradições como: Judaica, Patrística, Ortodoxa, "
            "Reformada, Wesleyana, Pentecostal, Liberal ou Contextual, conforme a pertinência."
        ),
        sermon="Gere um esboço de sermão expositivo equilibrado.",
    ),
    Depth.ACADEMIC: DepthFragments(
        label="ACADÊMICO",
        tone="Tom estritamente acadêmico, crítico e exegético. Linguagem formal, técnica.",
        focus="Priorize a profundidade técnica, crítica textual e precisão histórica.",
        lexical=(
            "OBRIGATÓRIO: Analise 5-7 palavras-chave. Forneça a MORFOLOGIA COMPLETA e cite "
            "léxicos acadêmicos (BDAG/HALOT)."
        ),
        theology=(
            "Análise exaustiva e plural. OBRIGATÓRIO incluir, quando relevante: Exegese "
            "Judaica/Antiga, Patrística (Grega/Latina), Reforma, Crítica-Histórica Moderna e "
            "Perspectivas Contemporâneas."
        ),
        sermon="Gere um esboço de sermão EXPOSITIVO denso, com forte base exegética.",
    ),
    Depth.SERMON: DepthFragments(
        label="SERMÃO",
        tone="Tom pastoral, proclamativo, persuasivo e eloquente. Focado na oratória.",
        focus="O foco total é gerar um sermão bíblico completo. A exegese deve servir à homilética.",
        lexical="Selecione palavras que enriqueçam a pregação e sejam explicáveis no púlpito.",
        theology=(
            "Apresente visões que ajudem na aplicação (ex: Puritana, Avivalista). "
            "Cite grandes pregadores indicando a ERA."
        ),
        sermon=(
            "PRIORIDADE MÁXIMA: Gere um SERMÃO EXPOSITIVO COMPLETO. OBRIGATÓRIO: cada ponto de "
            "explicação e aplicação DEVE incluir referências bíblicas explícitas entre parênteses "
            "após cada afirmação. Ex: (Jo 3:16)."
        ),
    ),
}


PASSAGE_SYSTEM_PROMPT = """
<IDENTITY>
Você é um teólogo sênior experiente, especialista em exegese bíblica, línguas originais (Grego/Hebraico) e homilética.
</IDENTITY>

<TASK>
Gerar um estudo bíblico estruturado em JSON estrito para a passagem solicitada.
</TASK>

<CONFIGURATION>
- Profundidade: {depth_label}
- Tom de voz: {tone}
- Instrução específica: {focus}
</CONFIGURATION>

<FORMATTING_RULES>
1. Referências bíblicas no sermão: nos campos 'points.explanation' e 'points.application' é ABSOLUTAMENTE OBRIGATÓRIO terminar cada sentença ou argumento-chave com a referência bíblica de apoio entre parênteses, no formato (Livro Cap:Verso). Exemplo: "Paulo exorta a igreja (Rm 12:1)".
2. Foco do texto: o campo 'text_focus' do objeto 'sermon' é OBRIGATÓRIO e define a base do sermão.
3. O campo 'era' no array de teólogos é OBRIGATÓRIO. Ex: "Séc IV", "Reforma", "Contemporâneo".
4. O campo 'key_quote' do resumo deve ser uma frase impactante que resuma a essência do texto, digna da capa de um livro.
5. Respeite a tradução solicitada ({translation}) no campo 'text_base'.
</FORMATTING_RULES>
"""

PASSAGE_USER_PROMPT = """
<CONTEXT>
Passagem para análise: "{subject}"
Tradução preferencial: "{translation}"
</CONTEXT>

<INSTRUCTIONS>
1. LÉXICO: {lexical}
2. TEOLOGIA: {theology}
3. SERMÃO: {sermon}
4. PARALELOS: Liste correlações teológicas claras.
</INSTRUCTIONS>

<OUTPUT_FORMAT>
Retorne APENAS o JSON válido conforme o schema, sem texto antes ou depois e sem blocos de código.
</OUTPUT_FORMAT>
"""

BOOK_SYSTEM_PROMPT = """
<IDENTITY>
Você é um teólogo sênior experiente, especialista em Introdução Bíblica (Isagogia), Teologia Bíblica e História Eclesiástica.
</IDENTITY>

<TASK>
Gerar uma introdução completa, exaustiva e acadêmica sobre o livro da Bíblia solicitado.
</TASK>

<GOAL>
O usuário quer "Conhecer o Livro" em profundidade. Preencha TODOS os 18 campos do schema com informações ricas, precisas e bem fundamentadas.
</GOAL>

<STYLE>
Acadêmico-pastoral. Educacional. Detalhado.
</STYLE>
"""

BOOK_USER_PROMPT = """
<CONTEXT>
Livro: "{subject}"
</CONTEXT>

<TASK>
Gere uma Introdução Completa ao Livro de "{subject}".
</TASK>

<REQUIRED_SECTIONS>
1. Identificação Geral
2. Autoria (evidências internas/externas)
3. Datação
4. Destinatários
5. Contexto Histórico e Cultural
6. Contexto Bíblico e Canônico
7. Propósito do Livro
8. Temas Principais
9. Mensagem Central
10. Estrutura Literária
11. Estilo e Características
12. Principais Personagens
13. Questões Teológicas
14. Passagens-Chave
15. Plano Redentivo (Cristocêntrico)
16. Aplicações Práticas
17. Desafios de Interpretação
18. Conclusão
</REQUIRED_SECTIONS>

<OUTPUT_FORMAT>
Retorne APENAS o JSON válido conforme o schema, sem texto antes ou depois e sem blocos de código.
</OUTPUT_FORMAT>
"""


@dataclass(frozen=True)
class PromptBundle:
    """Everything the generation client needs for one study."""

    system_instruction: str
    user_instruction: str
    schema: SchemaNode
    mode: Mode
    depth: Depth


def resolve_depth(depth: Union[Depth, str, None]) -> Depth:
    """Map a raw depth to a known Depth, falling back to DETAILED."""
    try:
        return Depth(depth)
    except ValueError:
        logger.warning(
            f"Unknown depth {depth!r}, falling back to detailed",
            extra={"event": "depth_fallback", "depth": str(depth)},
        )
        return Depth.DETAILED


def fragments_for(depth: Union[Depth, str, None]) -> DepthFragments:
    return DEPTH_FRAGMENTS[resolve_depth(depth)]


def build_passage_prompt(request: StudyRequest) -> PromptBundle:
    depth = resolve_depth(request.depth)
    fragments = DEPTH_FRAGMENTS[depth]
    translation = request.translation.value

    system_instruction = PASSAGE_SYSTEM_PROMPT.format(
        depth_label=fragments.label,
        tone=fragments.tone,
        focus=fragments.focus,
        translation=translation,
    )
    user_instruction = PASSAGE_USER_PROMPT.format(
        subject=request.subject,
        translation=translation,
        lexical=fragments.lexical,
        theology=fragments.theology,
        sermon=fragments.sermon,
    )

    return PromptBundle(
        system_instruction=system_instruction.strip(),
        user_instruction=user_instruction.strip(),
        schema=PASSAGE_SCHEMA,
        mode=Mode.PASSAGE,
        depth=depth,
    )


def build_book_prompt(request: StudyRequest) -> PromptBundle:
    """Book mode ignores depth; the bundle records DETAILED for sampling purposes."""
    return PromptBundle(
        system_instruction=BOOK_SYSTEM_PROMPT.strip(),
        user_instruction=BOOK_USER_PROMPT.format(subject=request.subject).strip(),
        schema=BOOK_SCHEMA,
        mode=Mode.BOOK,
        depth=Depth.DETAILED,
    )


def build_prompt(request: StudyRequest) -> PromptBundle:
    """Select the prompt template and schema for the request's mode."""
    if request.mode == Mode.BOOK:
        return build_book_prompt(request)
    return build_passage_prompt(request)
