# CLI package for Expert KB
"""
Command-line front end for Expert KB knowledge bases.

Commands:
    expertkb check <file>       — Validate a source file
    expertkb show <file>        — Show entries, questions and tips
    expertkb categories <file>  — Show the category catalog
    expertkb ask <file>         — Resolve answers given as arguments
    expertkb interview <file>   — Answer the questions interactively
"""
