"""
EczemaHub - community resource catalog for eczema treatment, prevention and research.
"""

__version__ = "1.0.0"
__codename__ = "Calamine"
