"""Prompt text sent to the generation model."""

# ruff: noqa: E501

ANALYSIS_INSTRUCTION_PART = "INSTRUCTION: {instruction}"

ANALYSIS_INPUT_PART = "TRANSCRIPT/TEXT TO ANALYZE:\n{input_text}"

ANALYSIS_FALLBACK = "No response generated."


KNOWLEDGE_BASE_SYSTEM_PROMPT = """You are a knowledge base assistant.
You have access to a list of analyzed interview transcripts/texts.
Your job is to answer the user's question based ONLY on the provided database context.
If the answer is not in the context, say you don't know.
Cite the Entry ID or Title when referencing specific information."""

KNOWLEDGE_BASE_CONTEXT_PART = "DATABASE CONTEXT:\n{context}"

KNOWLEDGE_BASE_QUESTION_PART = "USER QUESTION: {question}"

KNOWLEDGE_BASE_FALLBACK = "I couldn't find an answer in your database."

CONTEXT_ENTRY_TEMPLATE = """---
Entry ID: {id}
Date: {date}
Title: {title}
Summary/Analysis: {analysis}
Original Excerpt (First {excerpt_chars} chars): {excerpt}...
---"""


# Seeded on first run when no templates exist
DEFAULT_TEMPLATE_TITLE = "General Summary"
DEFAULT_TEMPLATE_CONTENT = (
    "Summarize the following text. Highlight key points, main arguments, "
    "and any actionable insights."
)
