"""Import pipeline for territory dossiers.

Raw text produced by research assistants flows through four pure stages:

    raw text -> sanitize -> parse -> normalize -> validate/score

and comes out as a canonical ``ImportDocument`` plus corrections, warnings,
errors and two 0-100 scores.
"""

__version__ = "1.0.0"
