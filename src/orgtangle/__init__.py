"""
orgtangle - include-aware tangling for Org documents

Expands ``#+include:`` directives into one composite document and rewrites
``:tangle`` destinations so an external tangler can extract every block from
a single self-contained file.
"""

__version__ = "0.3.0"
__all__ = ["__version__"]
