"""
Export Service

Markdown rendering of a study. Branches on the `mode` tag and reads only
the fields of the matching variant.
"""

from datetime import datetime
from typing import Iterable, Optional, Union

from exegesis.study.model import BookStudy, LexicalEntry, PassageStudy


def format_date(iso_timestamp: str) -> str:
    """Render an ISO timestamp as dd/mm/yyyy, or return it unchanged if unparseable."""
    try:
        return datetime.fromisoformat(iso_timestamp).strftime("%d/%m/%Y")
    except ValueError:
        return iso_timestamp


def _bullets(items: Iterable[str], indent: str = "") -> str:
    return "\n".join(f"{indent}- {item}" for item in items)


def _blank(value: Optional[str]) -> str:
    return value or ""


def _original_form(entry: LexicalEntry) -> str:
    if entry.transliteration:
        return f"{entry.lemma} ({entry.transliteration})"
    return entry.lemma


def export_book_markdown(study: BookStudy) -> str:
    b = study.book_intro
    lines = [
        f"# Introdução ao Livro de {b.general_id.name}",
        f"**Gerado em:** {format_date(study.meta.generated_at)}",
        "",
        "---",
        "",
        "## 1. Identificação Geral",
        f"- **Nome:** {b.general_id.name}",
        f"- **Original:** {b.general_id.original_name}",
        f"- **Posição:** {b.general_id.canon_position}",
        "",
        "## 2. Autoria",
        f"- **Tradicional:** {b.authorship.author_traditional}",
        f"- **Evidências Internas:** {b.authorship.internal_evidence}",
        f"- **Evidências Externas:** {b.authorship.external_evidence}",
        f"- **Debate Acadêmico:** {b.authorship.academic_debate}",
        "",
        "## 3. Datação",
        f"- **Data:** {b.dating.approximate_date}",
        f"- **Contexto:** {b.dating.historical_context}",
        f"- **Eventos:** {b.dating.contemporary_events}",
        f"- **Argumentos:** {b.dating.arguments}",
        "",
        "## 4. Destinatários",
        f"- **Público:** {b.recipients.target_audience}",
        f"- **Local:** {b.recipients.location}",
        f"- **Condições Sociais:** {b.recipients.social_conditions}",
        f"- **Situação Espiritual:** {b.recipients.spiritual_situation}",
        "",
        "## 5. Contexto Histórico e Cultural",
        f"- **Panorama Político:** {b.context_cultural.political_panorama}",
        f"- **Cultura e Costumes:** {b.context_cultural.culture_customs}",
        f"- **Econômico/Social:** {b.context_cultural.economic_social}",
        f"- **Relação com Vizinhos:** {b.context_cultural.neighbors_relation}",
        "",
        "## 6. Contexto Canônico",
        f"- **Relação Anterior/Posterior:** {b.context_canonical.relation_prev_next}",
        f"- **Continuidade/Ruptura:** {b.context_canonical.continuity_rupture}",
        f"- **Cumprimento de Promessas:** {b.context_canonical.promise_fulfillment}",
        f"- **Preparação Narrativa:** {b.context_canonical.narrative_preparation}",
        "",
        "## 7. Propósito",
        f"- **Objetivo:** {b.purpose.main_objective}",
        f"- **Problemas:** {b.purpose.problems_addressed}",
        f"- **Intenção:** {b.purpose.intent}",
        "",
        "## 8. Temas Principais",
        _bullets(b.themes),
        "",
        "## 9. Mensagem Central",
        f"> {b.central_message}",
        "",
        "## 10. Estrutura Literária",
        f"**Gênero:** {b.structure.genre}",
        f"**Progressão:** {b.structure.progression}",
        "### Seções",
        _bullets(b.structure.sections),
        "",
        "## 11. Estilo",
        f"- **Características:** {b.style.literary_features}",
        f"- **Técnicas:** {b.style.techniques}",
        f"- **Palavras-Chave:** {', '.join(b.style.keywords)}",
        "",
        "## 12. Principais Personagens",
        "\n".join(f"- **{c.name}:** {c.role}" for c in b.characters),
        "",
        "## 13. Teologia",
        f"- **Doutrinas:** {', '.join(b.theology.doctrines)}",
        f"- **Contribuições:** {b.theology.contributions}",
        f"- **Controvérsias:** {b.theology.controversies}",
        "",
        "## 14. Passagens-Chave",
        "\n".join(f"- **{k.reference}:** {k.description}" for k in b.key_passages),
        "",
        "## 15. Plano Redentivo",
        f"- **Aponta para Cristo:** {b.redemptive_plan.christ_pointer}",
        f"- **Relação com a Salvação:** {b.redemptive_plan.salvation_relation}",
        "",
        "## 16. Aplicações Práticas",
        "- **Princípios:**",
        _bullets(b.application.principles, indent="  "),
        f"- **Relevância Eclesial:** {b.application.church_relevance}",
        f"- **Implicações Pastorais:** {b.application.pastoral_implications}",
        "",
        "## 17. Desafios de Interpretação",
        f"- **Problemas Hermenêuticos:** {b.interpretation_challenges.hermeneutic_problems}",
        "- **Textos Difíceis:**",
        _bullets(b.interpretation_challenges.difficult_texts, indent="  "),
        "",
        "## 18. Conclusão",
        b.conclusion,
    ]
    return "\n".join(lines).strip()


def export_passage_markdown(study: PassageStudy) -> str:
    meta, summary, content = study.meta, study.summary, study.content

    sections = [
        "\n".join(
            [
                f"# Estudo Exegético: {meta.reference}",
                f"**Tradução:** {meta.translation.value}",
                f"**Gerado em:** {format_date(meta.generated_at)}",
                "",
                f'> "{summary.key_quote}"',
                "",
                "---",
            ]
        ),
        f"## Resumo Executivo\n{summary.executive}",
        f"### Pontos para Pregação\n{_bullets(summary.preaching_points)}",
        "---",
        f"## Texto Base\n> {content.text_base}",
        f"## Introdução\n{content.intro_definition}",
        (
            f"## Contexto\n**Literário:** {content.context_literary}\n\n"
            f"**Histórico:** {content.context_historical}"
        ),
    ]

    if content.parallels:
        sections.append(
            "## Paralelos e Correlações\n"
            + "\n\n".join(
                f"### {p.reference} ({p.correlation})\n{p.text}" for p in content.parallels
            )
        )

    lexical_rows = "\n".join(
        f"| {entry.word} | {_original_form(entry)} "
        f"| {entry.morphology} | {entry.meaning} |"
        for entry in content.lexical_analysis
    )
    sections.append(
        "## Análise Léxica\n"
        "| Palavra | Original | Morfologia | Significado |\n"
        "|---------|----------|------------|-------------|\n" + lexical_rows
    )

    sections.append(
        "## Interpretação\n"
        + "\n\n".join(f"### {i.tradition}\n{i.summary}" for i in content.interpretations)
    )
    sections.append(
        "### Teólogos e Pensadores\n"
        + "\n\n".join(f"#### {t.name} ({t.era})\n{t.view}" for t in content.theologians)
    )

    if content.intertextuality:
        sections.append(f"## Intertextualidade\n{content.intertextuality}")

    sections.append(f"## Aplicação\n{content.implications}")

    if content.study_questions:
        sections.append(f"## Perguntas para Estudo\n{_bullets(content.study_questions)}")

    sections.append(
        "## Bibliografia Comentada\n"
        + "\n\n".join(
            f"### {entry.author}. *{entry.title}*. {_blank(entry.publisher)}, {_blank(entry.year)}.\n"
            f"> {entry.annotation}"
            for entry in content.bibliography
        )
    )

    sermon = study.sermon
    points = "\n\n".join(
        f"### {index}. {point.title}\n{point.explanation}\n\n"
        f"*Ilustração:* {point.illustration}\n*Aplicação:* {point.application}"
        for index, point in enumerate(sermon.points, start=1)
    )
    sections.extend(
        [
            "---",
            f"# SERMÃO EXPOSITIVO: {sermon.title}\n\n**Texto:** {sermon.text_focus}",
            f"## Introdução\n{sermon.introduction}",
            f"## Tópicos\n{points}",
            f"## Conclusão\n{sermon.conclusion}",
        ]
    )

    if study.slides:
        slides = "\n\n".join(
            f"### Slide {index}: {slide.title}\n{_bullets(slide.bullets)}\n*Visual:* {slide.image_hint}"
            for index, slide in enumerate(study.slides, start=1)
        )
        sections.extend(["---", f"## Esboço de Slides\n{slides}"])

    return "\n\n".join(sections).strip()


def export_to_markdown(study: Union[PassageStudy, BookStudy]) -> str:
    """Render a study as Markdown, branching on its mode tag."""
    if study.mode == "book":
        return export_book_markdown(study)
    return export_passage_markdown(study)
