"""
Rendering Context

Responsibilities:
- Holds the authored resume content model and the content provider seam
- Measures the fully populated document (measurement oracle)
- Typesets the final PDF with the solver's allocation (final renderer)
- Validates the rendered layout and reports actionable issues

Owns: Typesetting backend, markup templates, PDF output, layout diagnostics
Never: Decides how many bullets to keep (the layout context does)
"""
