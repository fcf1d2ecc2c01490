"""
CCA - Code Complexity Analyzer

Structural-complexity diagnostics for C# sources.
"""
