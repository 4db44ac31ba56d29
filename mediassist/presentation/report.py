"""Rendering of a diagnosis result."""
from typing import Callable

import streamlit as st

from mediassist.domain.models import DiagnosisResult
from mediassist.domain.rules import PROBABILITY_WEIGHT, classify_probability, probability_bucket, urgency_display


def format_report_markdown(result: DiagnosisResult) -> str:
    """Format a result as a standalone Markdown document."""
    display = urgency_display(result.urgency)
    lines = [f"# {display.icon} {display.title}\n"]

    lines.append(f"**Summary:** {result.summary}\n")
    if display.bucket == "emergency":
        lines.append("**Seek immediate medical care by calling your local emergency number.**\n")

    lines.append("## 🏥 Potential Conditions (NOT a diagnosis)")
    for condition in result.conditions:
        badge = classify_probability(condition.probability)
        lines.append(f"### {condition.name} ({condition.probability})")
        if not badge.recognized:
            lines.append("_Likelihood label not recognized; shown as low._")
        lines.append(condition.description)
        if condition.matched_symptoms:
            lines.append("- Matches symptoms: " + ", ".join(condition.matched_symptoms))
        lines.append("")

    lines.append("## 📝 Recommended Actions")
    for i, action in enumerate(result.recommended_actions, 1):
        lines.append(f"{i}. {action}")
    lines.append("")

    lines.append("## ❓ Questions to Ask Your Doctor")
    for question in result.questions_to_ask_doctor:
        lines.append(f"- {question}")
    lines.append("")

    lines.append("---")
    lines.append(f"⚠️ {result.disclaimer}")
    return "\n".join(lines)


def _urgency_banner(tone: str) -> Callable:
    return {
        "error": st.error,
        "warning": st.warning,
        "info": st.info,
        "success": st.success,
    }[tone]


def show_report(result: DiagnosisResult, on_reset: Callable[[], None]) -> None:
    display = urgency_display(result.urgency)
    banner = _urgency_banner(display.tone)
    banner(f"**{display.title}**\n\n{result.summary}", icon=display.icon)

    left, right = st.columns([3, 2])

    with left:
        st.markdown("### 🩺 Potential Conditions")
        for condition in result.conditions:
            bucket = probability_bucket(condition.probability)
            with st.container(border=True):
                st.markdown(f"**{condition.name}**  \n_{condition.probability}_")
                st.progress(PROBABILITY_WEIGHT[bucket])
                st.write(condition.description)
                if condition.matched_symptoms:
                    st.caption("Matches symptoms: " + " · ".join(condition.matched_symptoms))

    with right:
        st.markdown("### ✅ Recommended Actions")
        for action in result.recommended_actions:
            st.markdown(f"- {action}")

        st.markdown("### ❓ Questions for Your Doctor")
        for question in result.questions_to_ask_doctor:
            st.markdown(f"- {question}")

    st.caption(result.disclaimer)

    col1, col2 = st.columns([1, 1])
    with col1:
        st.download_button(
            "⬇️ Download Report",
            data=format_report_markdown(result),
            file_name="mediassist-report.md",
            mime="text/markdown",
            width="stretch",
        )
    with col2:
        st.button("🔄 Start New Analysis", on_click=on_reset, width="stretch")
