# speciesfill/__init__.py
from __future__ import annotations
from speciesfill.datatypes import Candidate, Resolution, Status
from speciesfill.resolver import ResolutionSession, resolve

__all__ = ["Candidate", "Resolution", "ResolutionSession", "Status", "resolve"]
