"""
infragraph - compiles cloud architecture diagrams into ordered resource graphs.
"""

__version__ = "0.1.0"
