"""
Layout definitions sub-package for jhu-dumps.

Contains one YAML file per historical column layout of the daily report
feed. The loader module (layout_registry.py in the parent package) reads
these files once at import time.
"""
