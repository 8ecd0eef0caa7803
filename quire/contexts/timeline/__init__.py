"""
Timeline Context

Responsibilities:
- Parses free-text experience requirements
- Detects gaps and shortfalls in the candidate's work history
- Synthesizes segments so the history is continuous and meets the requirement
- Derives the floor date and seniority threshold for content generation

Owns: Work history reconciliation, experience arithmetic
Never: Alters real work entries, renders anything
"""
